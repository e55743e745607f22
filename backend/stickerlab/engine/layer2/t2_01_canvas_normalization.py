"""T2.01 — Canvas Normalization.

Fixed-size transparent thumbnail with the subject centered at the configured
fill fraction.
"""

from __future__ import annotations

import logging

from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.registry import Layer, stage
from stickerlab.utils.canvas import normalize_canvas
from stickerlab.utils.masking import opaque_bbox

logger = logging.getLogger(__name__)


@stage(
    id="T2.01",
    layer=Layer.PRESENTATION,
    dependencies=["T0.02"],
    description="Center and scale the cut-out onto the thumbnail canvas",
)
def canvas_normalization(ctx: IsolationContext, config: IsolationConfig) -> None:
    if ctx.masked_image is None:
        return
    if opaque_bbox(ctx.masked_image) is None:
        logger.info("Cut-out is fully transparent; no thumbnail")
        return
    ctx.canvas_image = normalize_canvas(
        ctx.masked_image, config.canvas_size, config.fill_fraction
    )
