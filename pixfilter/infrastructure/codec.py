from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from ..errors import DecodeError, EncodeError
from ..processing.raster import FullColor, Raster

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def decode(path: PathLike) -> FullColor:
    try:
        with Image.open(path) as img:
            img.load()
            return FullColor(img.convert("RGB"))
    except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Failed to load image {path}: {exc}") from exc


def encode(raster: Raster, path: PathLike) -> None:
    """Write ``raster`` as a single channel (tone) or RGB (full color) image."""

    try:
        raster.image.save(path)
    except (OSError, KeyError, ValueError) as exc:
        # Pillow raises ValueError/KeyError for an unknown extension.
        raise EncodeError(f"Failed to save image {path}: {exc}") from exc
    logger.info("The image is saved: %s", path)
