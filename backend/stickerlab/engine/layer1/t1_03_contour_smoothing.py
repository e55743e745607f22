"""T1.03 — Contour Smoothing.

Sub-sample the ordered contour and chain cubic segments through it, in
unit-square coordinates.
"""

from __future__ import annotations

import logging

from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.registry import Layer, stage
from stickerlab.models.contour_path import NormalizedContourPath
from stickerlab.utils.bezier import smooth_contour

logger = logging.getLogger(__name__)


@stage(
    id="T1.03",
    layer=Layer.CONTOUR,
    dependencies=["T1.02"],
    description="Closed cubic path through the sampled contour",
)
def contour_smoothing(ctx: IsolationContext, config: IsolationConfig) -> None:
    if ctx.masked_image is None:
        return
    if ctx.contour is None or len(ctx.contour) == 0:
        ctx.contour_path = NormalizedContourPath.unit_rectangle()
        return

    width, height = ctx.masked_size
    ctx.contour_path = smooth_contour(ctx.contour, width, height, config.target_points)
    if ctx.contour_path.is_fallback:
        logger.info("Contour too short to smooth (%d points)", len(ctx.contour))
