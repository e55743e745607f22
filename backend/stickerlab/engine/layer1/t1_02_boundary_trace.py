"""T1.02 — Boundary Trace.

Walk the edge buffer into an ordered contour (8-connected, with stall
recovery). An empty buffer leaves an empty contour.
"""

from __future__ import annotations

import logging

import numpy as np

from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.registry import Layer, stage
from stickerlab.utils.contour import trace_boundary

logger = logging.getLogger(__name__)


@stage(
    id="T1.02",
    layer=Layer.CONTOUR,
    dependencies=["T1.01"],
    description="Ordered 8-connected boundary walk",
)
def boundary_trace(ctx: IsolationContext, config: IsolationConfig) -> None:
    if ctx.edges is None:
        ctx.contour = np.empty((0, 2), dtype=np.int64)
        return
    ctx.contour = trace_boundary(
        ctx.edges,
        recovery_radius=config.recovery_radius,
        max_points=config.max_trace_points,
        min_loop_points=config.min_loop_points,
    )
    if len(ctx.contour) == 0:
        logger.info("No boundary pixels; contour will fall back to the unit rectangle")
    else:
        logger.debug("Traced %d ordered boundary points", len(ctx.contour))
