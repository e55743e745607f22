"""Contour smoothing — ordered pixel contour to a closed, unit-square cubic path."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray
from svgpathtools import CubicBezier

from stickerlab.models.contour_path import NormalizedContourPath

DEFAULT_TARGET_POINTS = 120


def sample_contour(contour: NDArray, target_points: int = DEFAULT_TARGET_POINTS) -> NDArray:
    """Every k-th point, k chosen so at most target_points survive. Order is kept."""
    pts = np.asarray(contour)
    n = len(pts)
    if n == 0 or target_points <= 0:
        return pts[:0]
    # Rounded up so at most target_points survive; a floored step can overshoot
    step = max(1, math.ceil(n / target_points))
    return pts[::step]


def smooth_contour(
    contour: NDArray,
    width: int,
    height: int,
    target_points: int = DEFAULT_TARGET_POINTS,
) -> NormalizedContourPath:
    """Fit a closed chain of cubic segments through the sampled contour.

    Segment i runs from P[i] to P[i+1] (indices wrap). Its first control
    point is the midpoint of P[i]→P[i+1]; its second is the midpoint of
    P[i+1]→P[i+2] reflected through P[i+1], so the tangent at every anchor
    is continuous. Coordinates are divided by (width, height).

    Fewer than 3 sampled points yields the unit-rectangle fallback.
    """
    if width <= 0 or height <= 0:
        return NormalizedContourPath.unit_rectangle()

    sampled = sample_contour(contour, target_points)
    if len(sampled) < 3:
        return NormalizedContourPath.unit_rectangle()

    scale = np.array([width, height], dtype=np.float64)
    unit = sampled.astype(np.float64) / scale
    z = unit[:, 0] + 1j * unit[:, 1]
    n = len(z)

    segments: list[CubicBezier] = []
    for i in range(n):
        p0 = complex(z[i])
        p1 = complex(z[(i + 1) % n])
        p2 = complex(z[(i + 2) % n])
        c1 = p0 + (p1 - p0) * 0.5
        c2 = p1 - (p2 - p1) * 0.5
        segments.append(CubicBezier(p0, c1, c2, p1))

    return NormalizedContourPath(segments=segments)
