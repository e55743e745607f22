"""Tests for canvas normalization, padding and sticker sizing."""

from __future__ import annotations

import numpy as np
import pytest

from stickerlab.utils.canvas import (
    add_padding,
    canvas_layout,
    normalize_canvas,
    pad_to_square,
    sticker_style,
)
from stickerlab.utils.masking import opaque_bbox


def _opaque(width: int, height: int) -> np.ndarray:
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[:, :, :3] = (30, 160, 90)
    img[:, :, 3] = 255
    return img


class TestCanvasLayout:
    def test_tall_subject_on_default_canvas(self):
        layout = canvas_layout((50, 200))
        assert layout.scale == pytest.approx(2.048)
        assert layout.width == pytest.approx(102.4)
        assert layout.height == pytest.approx(409.6)
        assert layout.x == pytest.approx(204.8)
        assert layout.y == pytest.approx(51.2)
        assert layout.box == (205, 51, 307, 461)

    def test_wide_subject_limited_by_width(self):
        layout = canvas_layout((400, 100), (512, 512), 0.5)
        assert layout.width == pytest.approx(256.0)
        assert layout.height == pytest.approx(64.0)

    def test_zero_area_raises(self):
        with pytest.raises(ValueError):
            canvas_layout((0, 10))
        with pytest.raises(ValueError):
            canvas_layout((10, 0))


class TestNormalizeCanvas:
    def test_output_size_and_containment(self):
        out = normalize_canvas(_opaque(50, 200))
        assert out.shape == (512, 512, 4)

        alpha = out[:, :, 3]
        assert opaque_bbox(out) == (205, 51, 307, 461)
        assert not alpha[:51].any()
        assert not alpha[461:].any()
        assert not alpha[:, :205].any()
        assert not alpha[:, 307:].any()

    def test_fill_fraction_respected(self):
        out = normalize_canvas(_opaque(300, 300), (200, 100), 0.8)
        left, top, right, bottom = opaque_bbox(out)
        assert right - left <= 200 * 0.8
        assert bottom - top <= 100 * 0.8
        assert bottom - top == 80

    def test_transparent_margin_is_trimmed_first(self):
        img = np.zeros((300, 300, 4), dtype=np.uint8)
        img[100:150, 20:220] = (10, 20, 30, 255)
        out = normalize_canvas(img, (100, 100), 1.0)
        left, top, right, bottom = opaque_bbox(out)
        assert (left, right) == (0, 100)
        assert bottom - top == 25

    def test_idempotent(self):
        once = normalize_canvas(_opaque(50, 200))
        twice = normalize_canvas(once)
        assert np.array_equal(once, twice)

    def test_fully_transparent_raises(self, empty_cutout):
        with pytest.raises(ValueError):
            normalize_canvas(empty_cutout)


class TestPadding:
    def test_add_padding_rounds_up(self):
        out = add_padding(_opaque(20, 10), 3.2)
        assert out.shape == (18, 28, 4)
        assert not out[:4].any()
        assert out[4:14, 4:24, 3].all()

    def test_add_zero_padding_copies(self):
        img = _opaque(5, 5)
        out = add_padding(img, 0)
        assert np.array_equal(out, img)
        assert out is not img

    def test_pad_to_square_centers(self):
        out = pad_to_square(_opaque(20, 10))
        assert out.shape == (20, 20, 4)
        assert opaque_bbox(out) == (0, 5, 20, 15)

    def test_rgb_input_promoted(self):
        rgb = np.zeros((4, 6, 3), dtype=np.uint8)
        assert pad_to_square(rgb).shape == (6, 6, 4)


class TestStickerStyle:
    def test_defaults_without_display(self):
        style = sticker_style(300, 400)
        assert style.scale_factor == 1.0
        assert style.offset == 10.0
        assert style.line_width == 4.0
        assert style.padding == 34.0

    def test_scale_factor_from_display(self):
        # Height ratio 1012.8 / (0.6 * 844) = 2 dominates width ratio 1
        style = sticker_style(331.5, 1012.8, display_size=(390, 844))
        assert style.scale_factor == pytest.approx(2.0)
        assert style.offset == pytest.approx(20.0)
        assert style.line_width == pytest.approx(8.0)
        assert style.padding == pytest.approx(48.0)

    def test_degenerate_display_ignored(self):
        assert sticker_style(100, 100, display_size=(0, 0)).scale_factor == 1.0
