"""Morphological operations on alpha masks — edge bands and sticker outlines."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.ndimage import distance_transform_edt, grey_dilation, grey_erosion
from skimage.morphology import disk

# Intensity above which a gradient pixel counts as boundary (0-255 scale).
DEFAULT_EDGE_THRESHOLD = 30


def solid_mask(image: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """255 where alpha is non-zero, 0 elsewhere. Accepts HxWx4 or a bare alpha plane."""
    arr = np.asarray(image)
    alpha = arr[:, :, 3] if arr.ndim == 3 else arr
    return np.where(alpha > 0, 255, 0).astype(np.uint8)


def _footprint(radius: float) -> NDArray[np.uint8]:
    return disk(max(1, int(round(radius))))


def morphological_gradient(solid: NDArray[np.uint8], radius: float) -> NDArray[np.uint8]:
    """dilate(solid) − erode(solid) over a disc of the given radius.

    Pixels outside the image count as empty, so a subject touching the frame
    still gets an edge along the frame.
    """
    fp = _footprint(radius)
    dilated = grey_dilation(solid, footprint=fp, mode="constant", cval=0)
    eroded = grey_erosion(solid, footprint=fp, mode="constant", cval=0)
    return (dilated.astype(np.int16) - eroded.astype(np.int16)).clip(0, 255).astype(np.uint8)


def extract_edges(
    image: NDArray[np.uint8],
    radius: float = 2.0,
    threshold: int = DEFAULT_EDGE_THRESHOLD,
) -> NDArray[np.bool_]:
    """Boolean edge buffer: True on the band straddling the alpha boundary."""
    gradient = morphological_gradient(solid_mask(image), radius)
    return gradient > threshold


def outline_band(
    image: NDArray[np.uint8], line_width: float, offset: float = 0.0
) -> NDArray[np.bool_]:
    """Ring of pixels between offset and offset + line_width outside the subject.

    Distances are Euclidean from the nearest solid pixel, so fractional widths
    from the display scale factor are honored.
    """
    solid = solid_mask(image) > 0
    if not solid.any():
        return np.zeros(solid.shape, dtype=bool)
    dist = distance_transform_edt(~solid)
    return (dist > max(offset, 0.0)) & (dist <= offset + line_width)


def create_outline(
    image: NDArray[np.uint8], line_width: float = 3.0, offset: float = 0.0
) -> NDArray[np.uint8]:
    """White RGBA outline image, same size as the input, transparent elsewhere."""
    band = outline_band(image, line_width, offset)
    out = np.zeros(band.shape + (4,), dtype=np.uint8)
    out[band] = (255, 255, 255, 255)
    return out

