from __future__ import annotations

from PIL import Image

from ..config import DITHER_THRESHOLD
from .raster import FullColor, Raster, Tone

# (dx, dy, numerator / 16) for the neighbors not yet visited in raster order.
#     X  7
#  3  5  1
_FLOYD_STEINBERG = (
    (1, 0, 7),
    (-1, 1, 3),
    (0, 1, 5),
    (1, 1, 1),
)


def to_luma(raster: FullColor) -> Tone:
    """ITU-R 601 luma, floor(0.299 r + 0.587 g + 0.114 b)."""

    src = raster.image
    width, height = src.size
    out = Image.new("L", (width, height))
    src_pixels = src.load()
    dst_pixels = out.load()
    for y in range(height):
        for x in range(width):
            r, g, b = src_pixels[x, y]
            # Integer weights in thousandths keep the floor exact.
            dst_pixels[x, y] = (299 * r + 587 * g + 114 * b) // 1000
    return Tone(out)


def _quantize_tone(value: int) -> int:
    return 0 if value < DITHER_THRESHOLD else 255


def floyd_steinberg(raster: Tone) -> Tone:
    """Two-level Floyd–Steinberg error diffusion over a tone raster.

    Each error share is truncated toward zero, added to the neighbor's current
    value and clamped to 0..255. Shares that would land outside the image are
    dropped.
    """

    img = raster.image.copy()
    width, height = img.size
    pixels = img.load()

    for y in range(height):
        for x in range(width):
            old = pixels[x, y]
            new = _quantize_tone(old)
            pixels[x, y] = new
            error = old - new
            if not error:
                continue
            for dx, dy, weight in _FLOYD_STEINBERG:
                nx = x + dx
                ny = y + dy
                if nx < 0 or nx >= width or ny >= height:
                    continue
                share = int(error * weight / 16)
                pixels[nx, ny] = max(0, min(255, pixels[nx, ny] + share))

    return Tone(img)


def dither(raster: Raster) -> Tone:
    if isinstance(raster, FullColor):
        raster = to_luma(raster)
    return floyd_steinberg(raster)
