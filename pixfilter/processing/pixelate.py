from __future__ import annotations

from PIL import Image

from ..errors import DegenerateParameterError
from .raster import FullColor


def pixelate(raster: FullColor, block_size: int) -> FullColor:
    """Nearest-neighbor downsample by ``block_size`` then upsample back.

    The output keeps the input dimensions. A block size that reaches either
    image dimension leaves at most a single block across, and anything larger
    would need an empty intermediate raster, so both are rejected up front.
    """

    if block_size <= 0:
        raise DegenerateParameterError(f"Pixel size must be positive, got {block_size}")

    width, height = raster.size
    if block_size >= width or block_size >= height:
        raise DegenerateParameterError(
            f"Pixel size {block_size} is too large for a {width}x{height} image"
        )

    small = raster.image.resize((width // block_size, height // block_size), Image.NEAREST)
    return FullColor(small.resize((width, height), Image.NEAREST))
