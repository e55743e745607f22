"""Canvas utilities — thumbnail normalization, padding and sticker sizing."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from stickerlab.utils.masking import opaque_bbox, to_rgba

DEFAULT_CANVAS_SIZE = (512, 512)
DEFAULT_FILL_FRACTION = 0.8

# Share of the display the sticker may occupy: 85% of the width, 60% of the height.
_DISPLAY_WIDTH_SHARE = 0.85
_DISPLAY_HEIGHT_SHARE = 0.6

# Outline geometry at scale factor 1.0, in points.
_OUTLINE_OFFSET = 10.0
_OUTLINE_LINE_WIDTH = 4.0
_OUTLINE_MARGIN = 20.0


@dataclass(frozen=True)
class CanvasLayout:
    """Where a subject lands on the target canvas."""

    scale: float
    x: float
    y: float
    width: float
    height: float
    # Integer pixel placement actually used for drawing
    box: tuple[int, int, int, int]  # left, top, right, bottom (exclusive)


@dataclass(frozen=True)
class StickerStyle:
    offset: float
    line_width: float
    padding: float
    scale_factor: float = 1.0


def canvas_layout(
    size: tuple[int, int],
    target_size: tuple[int, int] = DEFAULT_CANVAS_SIZE,
    fill_fraction: float = DEFAULT_FILL_FRACTION,
) -> CanvasLayout:
    """Uniform scale-to-fit of a w×h subject into fill_fraction of the target."""
    w, h = size
    tw, th = target_size
    if w <= 0 or h <= 0:
        raise ValueError(f"cannot lay out a zero-area image ({w}x{h})")

    scale = min(tw * fill_fraction / w, th * fill_fraction / h)
    draw_w, draw_h = w * scale, h * scale
    x, y = (tw - draw_w) / 2.0, (th - draw_h) / 2.0

    px_w = max(1, int(round(draw_w)))
    px_h = max(1, int(round(draw_h)))
    left, top = (tw - px_w) // 2, (th - px_h) // 2
    return CanvasLayout(
        scale=scale,
        x=x,
        y=y,
        width=draw_w,
        height=draw_h,
        box=(left, top, left + px_w, top + px_h),
    )


def normalize_canvas(
    image: NDArray[np.uint8],
    target_size: tuple[int, int] = DEFAULT_CANVAS_SIZE,
    fill_fraction: float = DEFAULT_FILL_FRACTION,
) -> NDArray[np.uint8]:
    """Center and scale the opaque part of an RGBA image on a transparent canvas.

    The image is first trimmed to its non-transparent extent, so feeding a
    normalized canvas back in with the same settings returns it unchanged.
    Raises ValueError for images without a single opaque pixel.
    """
    rgba = to_rgba(image)
    bbox = opaque_bbox(rgba)
    if bbox is None:
        raise ValueError("cannot normalize an image with no opaque pixels")
    left, top, right, bottom = bbox
    subject = Image.fromarray(np.ascontiguousarray(rgba[top:bottom, left:right]))

    layout = canvas_layout(subject.size, target_size, fill_fraction)
    bl, bt, br, bb = layout.box
    resized = subject.resize((br - bl, bb - bt), Image.Resampling.LANCZOS)

    canvas = Image.new("RGBA", tuple(target_size), (0, 0, 0, 0))
    canvas.paste(resized, (bl, bt))
    return np.asarray(canvas, dtype=np.uint8).copy()


def add_padding(image: NDArray[np.uint8], amount: float) -> NDArray[np.uint8]:
    """Transparent border of ceil(amount) pixels on every side."""
    rgba = to_rgba(image)
    pad = max(0, int(np.ceil(amount)))
    if pad == 0:
        return rgba.copy()
    return np.pad(rgba, ((pad, pad), (pad, pad), (0, 0)), mode="constant", constant_values=0)


def pad_to_square(image: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """Center the image on a transparent max(w, h) square."""
    rgba = to_rgba(image)
    h, w = rgba.shape[:2]
    side = max(w, h)
    out = np.zeros((side, side, 4), dtype=np.uint8)
    top, left = (side - h) // 2, (side - w) // 2
    out[top : top + h, left : left + w] = rgba
    return out


def sticker_style(
    width: float,
    height: float,
    display_size: tuple[float, float] | None = None,
    offset: float = _OUTLINE_OFFSET,
    line_width: float = _OUTLINE_LINE_WIDTH,
    margin: float = _OUTLINE_MARGIN,
) -> StickerStyle:
    """Outline offset/width and padding for a cut-out shown on a display.

    The scale factor maps display points back to image pixels so the outline
    keeps the same on-screen thickness regardless of the cut-out resolution.
    """
    scale_factor = 1.0
    if display_size is not None:
        dw, dh = display_size
        if dw > 0 and dh > 0:
            scale_factor = max(
                height / (dh * _DISPLAY_HEIGHT_SHARE),
                width / (dw * _DISPLAY_WIDTH_SHARE),
            )
    scaled_offset = offset * scale_factor
    scaled_width = line_width * scale_factor
    return StickerStyle(
        offset=scaled_offset,
        line_width=scaled_width,
        padding=scaled_offset + scaled_width + margin,
        scale_factor=scale_factor,
    )
