"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    stages_registered: int = 0


class ContourPayload(BaseModel):
    svg_d: str = ""
    anchors: list[list[float]] = Field(default_factory=list)
    segment_count: int = 0
    is_fallback: bool = False


class IsolateResponse(BaseModel):
    status: str = "ok"
    instance_ids: list[int] = Field(default_factory=list)
    width: int = 0
    height: int = 0
    masked_png: str | None = None
    contour: ContourPayload | None = None
    thumbnail_png: str | None = None
    outline_png: str | None = None
    processing_time_ms: float = 0.0
    stage_timings: dict[str, float] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)
