"""NormalizedContourPath — closed cubic Bezier outline in unit-square coordinates.

Points are stored as complex numbers (x + yj) in svgpathtools segments, the
same representation the SVG layer uses. Coordinates are resolution-independent:
callers rescale by the (width, height) they render at.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from svgpathtools import CubicBezier, Path


def _straight_cubic(start: complex, end: complex) -> CubicBezier:
    """A cubic whose control points sit on the chord, i.e. a line segment."""
    delta = end - start
    return CubicBezier(start, start + delta / 3, start + 2 * delta / 3, end)


@dataclass
class NormalizedContourPath:
    """Closed sequence of cubic segments; segment i ends where segment i+1 starts."""

    segments: list[CubicBezier] = field(default_factory=list)
    # True when the outline is the degenerate unit rectangle, not a traced contour
    is_fallback: bool = False

    @classmethod
    def unit_rectangle(cls) -> "NormalizedContourPath":
        corners = [0j, 1 + 0j, 1 + 1j, 1j]
        segments = [
            _straight_cubic(corners[i], corners[(i + 1) % 4]) for i in range(4)
        ]
        return cls(segments=segments, is_fallback=True)

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    def anchors(self) -> NDArray[np.float64]:
        """Segment start points as an Nx2 (x, y) array in unit coordinates."""
        if not self.segments:
            return np.empty((0, 2))
        pts = np.array([seg.start for seg in self.segments], dtype=np.complex128)
        return np.column_stack([pts.real, pts.imag])

    def to_pixels(self, width: float, height: float) -> NDArray[np.float64]:
        """Anchor points rescaled to a width×height raster."""
        return self.anchors() * np.array([width, height], dtype=np.float64)

    def scaled(self, width: float, height: float) -> "NormalizedContourPath":
        """Copy with every point mapped from unit space to width×height."""

        def _map(z: complex) -> complex:
            return complex(z.real * width, z.imag * height)

        segments = [
            CubicBezier(_map(s.start), _map(s.control1), _map(s.control2), _map(s.end))
            for s in self.segments
        ]
        return NormalizedContourPath(segments=segments, is_fallback=self.is_fallback)

    def bbox(self) -> tuple[float, float, float, float]:
        """(xmin, ymin, xmax, ymax) of the curve itself, not just its anchors."""
        if not self.segments:
            return (0.0, 0.0, 0.0, 0.0)
        xmin, xmax, ymin, ymax = Path(*self.segments).bbox()
        return (float(xmin), float(ymin), float(xmax), float(ymax))

    def is_closed(self, tol: float = 1e-9) -> bool:
        if not self.segments:
            return False
        return abs(self.segments[-1].end - self.segments[0].start) <= tol

    def svg_d(self, precision: int = 4) -> str:
        """SVG path data: one M, one C per segment, closed with Z."""
        if not self.segments:
            return ""

        def _fmt(z: complex) -> str:
            return f"{round(z.real, precision):g},{round(z.imag, precision):g}"

        parts = [f"M{_fmt(self.segments[0].start)}"]
        for seg in self.segments:
            parts.append(f"C{_fmt(seg.control1)} {_fmt(seg.control2)} {_fmt(seg.end)}")
        parts.append("Z")
        return " ".join(parts)
