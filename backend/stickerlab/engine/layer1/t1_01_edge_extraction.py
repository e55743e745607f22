"""T1.01 — Edge Extraction.

Morphological gradient of the cut-out's alpha channel, thresholded into a
boolean edge buffer.
"""

from __future__ import annotations

import logging

from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.registry import Layer, stage
from stickerlab.utils.morphology import extract_edges

logger = logging.getLogger(__name__)


@stage(
    id="T1.01",
    layer=Layer.CONTOUR,
    dependencies=["T0.02"],
    description="Alpha-channel morphological gradient",
)
def edge_extraction(ctx: IsolationContext, config: IsolationConfig) -> None:
    if ctx.masked_image is None:
        return
    ctx.edges = extract_edges(ctx.masked_image, config.edge_radius, config.edge_threshold)
    logger.debug("Edge buffer: %d boundary pixels", int(ctx.edges.sum()))
