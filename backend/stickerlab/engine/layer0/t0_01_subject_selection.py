"""T0.01 — Subject Selection.

Among the detected foreground instances, keep the one whose sub-sampled
bounding box sits closest to the image center.
"""

from __future__ import annotations

import logging

from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.registry import Layer, stage
from stickerlab.utils.selection import instance_bounding_boxes, select_subject

logger = logging.getLogger(__name__)


@stage(
    id="T0.01",
    layer=Layer.MASKING,
    description="Pick the instance nearest the image center",
)
def subject_selection(ctx: IsolationContext, config: IsolationConfig) -> None:
    if ctx.instance_mask is None:
        # Pre-isolated cut-out: nothing to choose between
        if ctx.masked_image is None:
            ctx.no_subject = True
        return

    if not ctx.candidates:
        logger.info("No foreground instances detected")
        ctx.no_subject = True
        return

    ctx.bounding_boxes = instance_bounding_boxes(
        ctx.instance_mask, ctx.candidates, config.selection_stride
    )
    ctx.selected_ids = select_subject(
        ctx.instance_mask, ctx.candidates, boxes=ctx.bounding_boxes
    )
    logger.debug(
        "Selected %s out of %d candidate(s)", sorted(ctx.selected_ids), len(ctx.candidates)
    )
