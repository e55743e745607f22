"""T2.02 — Sticker Outline.

Pad the cut-out so the outline fits, then draw a white band at a fixed
offset around the subject.
"""

from __future__ import annotations

import logging

from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.registry import Layer, stage
from stickerlab.utils.canvas import add_padding, sticker_style
from stickerlab.utils.morphology import create_outline

logger = logging.getLogger(__name__)


@stage(
    id="T2.02",
    layer=Layer.PRESENTATION,
    dependencies=["T0.02"],
    description="White outline band around the padded cut-out",
)
def sticker_outline(ctx: IsolationContext, config: IsolationConfig) -> None:
    if ctx.masked_image is None:
        return
    width, height = ctx.masked_size
    style = sticker_style(
        width,
        height,
        config.display_size,
        offset=config.outline_offset,
        line_width=config.outline_line_width,
        margin=config.outline_margin,
    )
    ctx.padded_image = add_padding(ctx.masked_image, style.padding)
    ctx.outline_image = create_outline(ctx.padded_image, style.line_width, style.offset)
    logger.debug(
        "Outline: offset=%.1f width=%.1f padding=%.1f (scale %.2f)",
        style.offset,
        style.line_width,
        style.padding,
        style.scale_factor,
    )
