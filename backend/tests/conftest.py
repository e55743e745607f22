"""Shared test fixtures — synthetic photos, instance masks and cut-outs."""

from __future__ import annotations

import numpy as np
import pytest

# 140×140 canvas with an opaque 100×100 square at [20, 120) on both axes.
SQUARE_CANVAS = 140
SQUARE_ORIGIN = 20
SQUARE_SIZE = 100


def make_instance_mask(
    height: int, width: int, boxes: dict[int, tuple[int, int, int, int]]
) -> np.ndarray:
    """Instance-id grid; boxes map id → (x0, y0, x1, y1) with exclusive ends."""
    mask = np.zeros((height, width), dtype=np.uint8)
    for iid, (x0, y0, x1, y1) in boxes.items():
        mask[y0:y1, x0:x1] = iid
    return mask


def make_photo(height: int, width: int) -> np.ndarray:
    """Deterministic RGB gradient 'photo'."""
    ys, xs = np.mgrid[0:height, 0:width]
    r = (xs * 255 // max(width - 1, 1)).astype(np.uint8)
    g = (ys * 255 // max(height - 1, 1)).astype(np.uint8)
    b = np.full((height, width), 128, dtype=np.uint8)
    return np.stack([r, g, b], axis=-1)


def make_cutout(
    canvas: int = SQUARE_CANVAS, origin: int = SQUARE_ORIGIN, size: int = SQUARE_SIZE
) -> np.ndarray:
    """RGBA image: transparent canvas with one opaque square."""
    img = np.zeros((canvas, canvas, 4), dtype=np.uint8)
    img[origin : origin + size, origin : origin + size] = (200, 120, 40, 255)
    return img


@pytest.fixture
def square_cutout() -> np.ndarray:
    return make_cutout()


@pytest.fixture
def empty_cutout() -> np.ndarray:
    return np.zeros((50, 50, 4), dtype=np.uint8)


@pytest.fixture
def two_instance_scene() -> tuple[np.ndarray, np.ndarray]:
    """160×120 photo; id 1 centered (60×40), id 2 in the top-left corner."""
    photo = make_photo(120, 160)
    mask = make_instance_mask(
        120,
        160,
        {
            1: (50, 40, 110, 80),
            2: (0, 0, 30, 20),
        },
    )
    return photo, mask
