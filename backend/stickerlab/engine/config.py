"""Pipeline configuration — every tunable of the isolation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any


@dataclass
class IsolationConfig:
    """Controls subject selection, contour tracing and canvas output."""

    # Subject selection: sample every Nth row/column of the instance mask
    selection_stride: int = 5

    # Morphological gradient radius (px) and "boundary pixel" intensity cutoff
    edge_radius: float = 2.0
    edge_threshold: int = 30  # out of 255

    # Boundary tracing
    recovery_radius: int = 2  # Chebyshev radius for stall recovery
    max_trace_points: int = 10_000
    min_loop_points: int = 10

    # Contour smoothing point budget
    target_points: int = 120

    # Thumbnail canvas
    canvas_size: tuple[int, int] = (512, 512)
    fill_fraction: float = 0.8

    # Sticker outline (sizes at scale factor 1.0)
    outline_enabled: bool = True
    outline_offset: float = 10.0
    outline_line_width: float = 4.0
    outline_margin: float = 20.0
    display_size: tuple[int, int] | None = None

    # Caller-level deadline, checked between stages
    timeout_s: float | None = None

    # Keep edge buffer + ordered contour on the context after the run
    keep_intermediates: bool = False

    def with_overrides(self, overrides: dict[str, Any]) -> "IsolationConfig":
        """Return a copy with known fields replaced; unknown keys are ignored."""
        known = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if k in known and v is not None}
        for key in ("canvas_size", "display_size"):
            if key in changes and isinstance(changes[key], list):
                changes[key] = tuple(changes[key])
        return replace(self, **changes)
