"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class IsolateOptions(BaseModel):
    """Per-request pipeline overrides; unset fields keep the server defaults."""

    model_config = ConfigDict(extra="forbid")

    selection_stride: int | None = Field(default=None, ge=1)
    edge_radius: float | None = Field(default=None, gt=0)
    edge_threshold: int | None = Field(default=None, ge=0, le=255)
    recovery_radius: int | None = Field(default=None, ge=0)
    max_trace_points: int | None = Field(default=None, ge=1)
    min_loop_points: int | None = Field(default=None, ge=0)
    target_points: int | None = Field(default=None, ge=1)
    canvas_size: tuple[PositiveInt, PositiveInt] | None = None
    fill_fraction: float | None = Field(default=None, gt=0, le=1)
    outline_enabled: bool | None = None
    outline_offset: float | None = Field(default=None, ge=0)
    outline_line_width: float | None = Field(default=None, gt=0)
    outline_margin: float | None = Field(default=None, ge=0)
    timeout_s: float | None = Field(default=None, gt=0)


class IsolateRequest(BaseModel):
    image_png: str = Field(..., description="Base64 (or data: URL) encoded reference image")
    instance_mask_png: str | None = Field(
        default=None,
        description="Base64 grayscale PNG of instance ids; omit when image_png is already a cut-out",
    )
    candidates: list[int] | None = Field(
        default=None,
        description="Valid instance ids; defaults to the ids present in the mask",
    )
    display_width: float | None = Field(default=None, gt=0, description="Display width in points")
    display_height: float | None = Field(default=None, gt=0, description="Display height in points")
    options: IsolateOptions = Field(
        default_factory=IsolateOptions,
        description="Pipeline overrides (e.g., edge_radius=3, target_points=80)",
    )
