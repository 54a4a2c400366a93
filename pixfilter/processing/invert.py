from __future__ import annotations

from PIL import ImageOps

from .raster import FullColor


def invert(raster: FullColor) -> FullColor:
    """Map every channel value ``c`` to ``255 - c``."""

    return FullColor(ImageOps.invert(raster.image))
