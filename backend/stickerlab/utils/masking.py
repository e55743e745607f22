"""Masked-image rendering — cut the selected instances out of the reference image."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from stickerlab.models.instance_mask import InstanceMaskBuffer


def to_rgba(image: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """Promote gray / RGB / RGBA uint8 arrays to HxWx4."""
    arr = np.asarray(image, dtype=np.uint8)
    if arr.ndim == 2:
        arr = np.stack([arr, arr, arr], axis=-1)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"expected an HxW, HxWx3 or HxWx4 image, got {arr.shape}")
    if arr.shape[2] == 3:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        arr = np.concatenate([arr, alpha], axis=-1)
    return arr


def _mask_at_image_size(mask: InstanceMaskBuffer, width: int, height: int) -> NDArray[np.uint8]:
    if (mask.width, mask.height) == (width, height):
        return mask.ids
    # Segmentation models typically run below capture resolution.
    resized = Image.fromarray(mask.ids).resize((width, height), Image.Resampling.NEAREST)
    return np.asarray(resized, dtype=np.uint8)


def selection_mask(
    mask: InstanceMaskBuffer, instance_ids: Iterable[int], width: int, height: int
) -> NDArray[np.bool_]:
    """Boolean width×height mask of pixels belonging to any selected instance."""
    ids = _mask_at_image_size(mask, width, height)
    wanted = np.array(sorted({int(i) for i in instance_ids}), dtype=np.uint8)
    if wanted.size == 0:
        return np.zeros((height, width), dtype=bool)
    return np.isin(ids, wanted)


def render_masked_image(
    image: NDArray[np.uint8],
    mask: InstanceMaskBuffer,
    instance_ids: Iterable[int],
    crop: bool = True,
) -> NDArray[np.uint8] | None:
    """RGBA cut-out of the selected instances, optionally cropped to their extent.

    Returns None when no pixel belongs to the selection.
    """
    rgba = to_rgba(image)
    height, width = rgba.shape[:2]
    inside = selection_mask(mask, instance_ids, width, height)
    if not inside.any():
        return None

    out = np.zeros_like(rgba)
    out[inside] = rgba[inside]

    if crop:
        rows = np.nonzero(inside.any(axis=1))[0]
        cols = np.nonzero(inside.any(axis=0))[0]
        out = out[rows[0] : rows[-1] + 1, cols[0] : cols[-1] + 1]

    return np.ascontiguousarray(out)


def opaque_bbox(image: NDArray[np.uint8]) -> tuple[int, int, int, int] | None:
    """(left, top, right, bottom) of pixels with non-zero alpha, right/bottom exclusive."""
    alpha = to_rgba(image)[:, :, 3]
    rows = np.nonzero(alpha.any(axis=1))[0]
    if rows.size == 0:
        return None
    cols = np.nonzero(alpha.any(axis=0))[0]
    return (int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1)
