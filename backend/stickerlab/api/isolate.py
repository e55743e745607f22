"""POST /api/isolate — cut the subject out of a photo and trace its outline."""

from __future__ import annotations

import asyncio
import logging
import time

import numpy as np
from fastapi import APIRouter, Depends, HTTPException

from stickerlab.dependencies import get_isolation_config
from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.pipeline import create_pipeline
from stickerlab.models.instance_mask import InstanceMaskBuffer, candidate_set
from stickerlab.models.requests import IsolateRequest
from stickerlab.models.responses import ContourPayload, IsolateResponse
from stickerlab.utils.imaging import b64_to_bytes, bytes_to_b64, decode_mask_png, decode_png, encode_png

logger = logging.getLogger(__name__)

router = APIRouter()


def _build_context(req: IsolateRequest) -> IsolationContext:
    image = decode_png(b64_to_bytes(req.image_png))
    if req.instance_mask_png is None:
        return IsolationContext.from_masked_image(image)

    mask = InstanceMaskBuffer.from_array(decode_mask_png(b64_to_bytes(req.instance_mask_png)))
    candidates = candidate_set(req.candidates) if req.candidates is not None else None
    return IsolationContext.from_segmentation(image, mask, candidates)


def _b64_png(image: np.ndarray | None) -> str | None:
    if image is None:
        return None
    return bytes_to_b64(encode_png(image))


@router.post("/isolate", response_model=IsolateResponse)
async def isolate(
    req: IsolateRequest,
    base_config: IsolationConfig = Depends(get_isolation_config),
) -> IsolateResponse:
    start = time.perf_counter()
    try:
        ctx = _build_context(req)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    overrides = req.options.model_dump(exclude_none=True)
    if req.display_width and req.display_height:
        overrides["display_size"] = (req.display_width, req.display_height)
    config = base_config.with_overrides(overrides)

    pipeline = create_pipeline(config)
    # Pixel work is CPU-bound; keep it off the event loop
    ctx = await asyncio.get_running_loop().run_in_executor(None, pipeline.run, ctx)

    elapsed = (time.perf_counter() - start) * 1000
    width, height = ctx.masked_size
    contour = None
    if ctx.contour_path is not None:
        contour = ContourPayload(
            svg_d=ctx.contour_path.svg_d(),
            anchors=ctx.contour_path.anchors().round(5).tolist(),
            segment_count=ctx.contour_path.segment_count,
            is_fallback=ctx.contour_path.is_fallback,
        )

    logger.info("isolate: status=%s %dx%d in %.0fms", ctx.status, width, height, elapsed)
    return IsolateResponse(
        status=ctx.status,
        instance_ids=sorted(ctx.selected_ids),
        width=width,
        height=height,
        masked_png=_b64_png(ctx.masked_image),
        contour=contour,
        thumbnail_png=_b64_png(ctx.canvas_image),
        outline_png=_b64_png(ctx.outline_image),
        processing_time_ms=round(elapsed, 1),
        stage_timings=ctx.timings_ms,
        errors=ctx.errors,
    )
