"""Tests for boundary tracing over edge buffers."""

from __future__ import annotations

import numpy as np

from stickerlab.utils.contour import max_step, start_pixel, trace_boundary
from stickerlab.utils.morphology import extract_edges


def _ring_edges(square_cutout) -> np.ndarray:
    return extract_edges(square_cutout, radius=2.0)


class TestStartPixel:
    def test_leftmost_then_topmost(self):
        edges = np.zeros((10, 10), dtype=bool)
        edges[7, 3] = True
        edges[2, 3] = True
        edges[0, 5] = True
        assert start_pixel(edges) == (3, 2)

    def test_empty(self):
        assert start_pixel(np.zeros((5, 5), dtype=bool)) is None


class TestTraceBoundary:
    def test_empty_buffer_gives_empty_contour(self):
        contour = trace_boundary(np.zeros((20, 20), dtype=bool))
        assert contour.shape == (0, 2)

    def test_square_ring_is_a_closed_loop(self, square_cutout):
        edges = _ring_edges(square_cutout)
        contour = trace_boundary(edges)

        assert tuple(contour[0]) == (18, 20)
        # One lap around the outer layer of the band, roughly the perimeter
        assert 380 < len(contour) < 420
        assert max_step(contour) <= 1
        assert max_step(contour, closed=True) <= 1

    def test_every_point_is_an_edge_pixel_and_unique(self, square_cutout):
        edges = _ring_edges(square_cutout)
        contour = trace_boundary(edges)
        xs, ys = contour[:, 0], contour[:, 1]
        assert edges[ys, xs].all()
        assert len({tuple(p) for p in contour.tolist()}) == len(contour)

    def test_walk_visits_all_four_sides(self, square_cutout):
        contour = trace_boundary(_ring_edges(square_cutout))
        xs, ys = contour[:, 0], contour[:, 1]
        assert xs.min() == 18 and xs.max() == 121
        assert ys.min() == 18 and ys.max() == 121

    def test_deterministic(self, square_cutout):
        edges = _ring_edges(square_cutout)
        a = trace_boundary(edges)
        b = trace_boundary(edges)
        assert np.array_equal(a, b)

    def test_recovers_across_single_pixel_gap(self):
        edges = np.zeros((11, 25), dtype=bool)
        edges[5, 0:10] = True
        edges[5, 11:21] = True
        contour = trace_boundary(edges, recovery_radius=2)
        assert len(contour) == 20
        assert max_step(contour) == 2
        assert tuple(contour[-1]) == (20, 5)

    def test_stops_at_gap_wider_than_recovery_radius(self):
        edges = np.zeros((11, 25), dtype=bool)
        edges[5, 0:10] = True
        edges[5, 13:21] = True
        contour = trace_boundary(edges, recovery_radius=2)
        assert len(contour) == 10
        assert tuple(contour[-1]) == (9, 5)

    def test_point_cap(self, square_cutout):
        contour = trace_boundary(_ring_edges(square_cutout), max_points=50)
        assert len(contour) == 50

    def test_concave_shape_steps_stay_within_recovery_radius(self):
        img = np.zeros((120, 120, 4), dtype=np.uint8)
        img[20:100, 20:50, 3] = 255
        img[70:100, 20:100, 3] = 255
        edges = extract_edges(img)
        contour = trace_boundary(edges)
        assert len(contour) > 100
        assert max_step(contour) <= 2
        xs, ys = contour[:, 0], contour[:, 1]
        assert edges[ys, xs].all()


class TestMaxStep:
    def test_open_and_closed(self):
        contour = np.array([[0, 0], [1, 0], [1, 1], [4, 1]])
        assert max_step(contour) == 3
        assert max_step(contour, closed=True) == 4

    def test_short_contours(self):
        assert max_step(np.empty((0, 2), dtype=np.int64)) == 0
        assert max_step(np.array([[3, 3]])) == 0
