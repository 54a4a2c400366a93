"""Tagged image representations carried between pipeline steps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from PIL import Image


@dataclass(frozen=True)
class FullColor:
    """Three channel raster, always held as an ``RGB`` image."""

    image: Image.Image

    def __post_init__(self) -> None:
        if self.image.mode != "RGB":
            object.__setattr__(self, "image", self.image.convert("RGB"))

    @property
    def size(self):
        return self.image.size


@dataclass(frozen=True)
class Tone:
    """Single channel raster, always held as an ``L`` image."""

    image: Image.Image

    def __post_init__(self) -> None:
        if self.image.mode != "L":
            raise ValueError(f"Tone raster must be mode 'L', got {self.image.mode!r}")

    @property
    def size(self):
        return self.image.size


Raster = Union[FullColor, Tone]


def promote(raster: Raster) -> FullColor:
    """Return ``raster`` as full color, replicating a tone channel into r, g and b."""

    if isinstance(raster, FullColor):
        return raster
    gray = raster.image
    return FullColor(Image.merge("RGB", (gray, gray, gray)))
