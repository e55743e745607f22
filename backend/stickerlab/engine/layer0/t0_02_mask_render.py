"""T0.02 — Masked Image.

Cut the selected instances out of the reference image, cropped to their
extent. Falls back to every candidate when the selection renders empty.
"""

from __future__ import annotations

import logging

from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.registry import Layer, stage
from stickerlab.utils.masking import render_masked_image

logger = logging.getLogger(__name__)


@stage(
    id="T0.02",
    layer=Layer.MASKING,
    dependencies=["T0.01"],
    description="Render the selected instances as a cropped RGBA cut-out",
)
def mask_render(ctx: IsolationContext, config: IsolationConfig) -> None:
    if ctx.instance_mask is None or ctx.image is None:
        return

    masked = render_masked_image(ctx.image, ctx.instance_mask, ctx.selected_ids)
    if masked is None and ctx.selected_ids != ctx.candidates:
        logger.info("Selection %s rendered empty; using all instances", sorted(ctx.selected_ids))
        ctx.selected_ids = ctx.candidates
        masked = render_masked_image(ctx.image, ctx.instance_mask, ctx.candidates)

    if masked is None:
        ctx.no_subject = True
        return
    ctx.masked_image = masked
