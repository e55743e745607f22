"""Contour extraction — ordered 8-connected walk over an edge buffer.

  1. Start at the top-most pixel of the left-most occupied column.
  2. Scan the 8 neighbors clockwise, beginning two steps counter-clockwise
     of the last move, and take the first unconsumed edge pixel.
  3. When the walk stalls, jump to the nearest unconsumed pixel within the
     recovery radius (Chebyshev); give up if there is none.
  4. Stop when the walk reaches the start again after min_loop points,
     when nothing is left to visit, or at the point cap.

Membership is a dense boolean bitmap indexed [y, x]; consumed pixels are
cleared from it as the walk proceeds.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# Clockwise in image coordinates (y grows downward), starting east.
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (1, 0), (1, 1), (0, 1), (-1, 1),
    (-1, 0), (-1, -1), (0, -1), (1, -1),
)

# Scan starts this many steps after the last direction, i.e. 90° to its left.
_SCAN_OFFSET = 6

DEFAULT_RECOVERY_RADIUS = 2
DEFAULT_MAX_POINTS = 10_000
DEFAULT_MIN_LOOP_POINTS = 10


def start_pixel(edges: NDArray[np.bool_]) -> tuple[int, int] | None:
    """Smallest x, ties broken by smallest y. None if the buffer is empty."""
    cols = np.nonzero(edges.any(axis=0))[0]
    if cols.size == 0:
        return None
    x = int(cols[0])
    y = int(np.argmax(edges[:, x]))
    return (x, y)


def _nearest_remaining(
    remaining: NDArray[np.bool_], x: int, y: int, radius: int
) -> tuple[int, int] | None:
    """Closest unconsumed pixel in the (2r+1)² window around (x, y)."""
    height, width = remaining.shape
    x0, x1 = max(0, x - radius), min(width, x + radius + 1)
    y0, y1 = max(0, y - radius), min(height, y + radius + 1)
    ys, xs = np.nonzero(remaining[y0:y1, x0:x1])
    if ys.size == 0:
        return None
    xs = xs + x0
    ys = ys + y0
    d2 = (xs - x) ** 2 + (ys - y) ** 2
    # lexsort: last key is primary → distance, then y, then x
    best = np.lexsort((xs, ys, d2))[0]
    return (int(xs[best]), int(ys[best]))


def trace_boundary(
    edges: NDArray[np.bool_],
    recovery_radius: int = DEFAULT_RECOVERY_RADIUS,
    max_points: int = DEFAULT_MAX_POINTS,
    min_loop_points: int = DEFAULT_MIN_LOOP_POINTS,
) -> NDArray[np.int64]:
    """Walk the edge pixels into an ordered Nx2 array of (x, y).

    Returns an empty (0, 2) array when the buffer holds no edge pixel.
    The result is not guaranteed to be a simple polygon.
    """
    edges = np.asarray(edges, dtype=bool)
    start = start_pixel(edges)
    if start is None:
        return np.empty((0, 2), dtype=np.int64)

    height, width = edges.shape
    remaining = edges.copy()
    total = int(remaining.sum())

    ordered: list[tuple[int, int]] = []
    x, y = start
    last_dir = 0

    while True:
        ordered.append((x, y))
        remaining[y, x] = False
        if len(ordered) >= total or len(ordered) >= max_points:
            break

        can_close = len(ordered) > min_loop_points
        closed = False
        found = False
        for i in range(8):
            d = (last_dir + i + _SCAN_OFFSET) % 8
            dx, dy = DIRECTIONS[d]
            nx, ny = x + dx, y + dy
            if not (0 <= nx < width and 0 <= ny < height):
                continue
            if can_close and (nx, ny) == start:
                closed = True
                break
            if remaining[ny, nx]:
                x, y = nx, ny
                last_dir = d
                found = True
                break

        if closed:
            break
        if not found:
            nearby = _nearest_remaining(remaining, x, y, recovery_radius)
            if nearby is None:
                break
            x, y = nearby

    return np.array(ordered, dtype=np.int64)


def max_step(contour: NDArray[np.int64], closed: bool = False) -> int:
    """Largest Chebyshev distance between consecutive contour points."""
    if len(contour) < 2:
        return 0
    pts = np.asarray(contour)
    if closed:
        pts = np.vstack([pts, pts[:1]])
    steps = np.abs(np.diff(pts, axis=0)).max(axis=1)
    return int(steps.max())
