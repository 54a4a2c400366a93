"""The closed set of steps a filter pipeline can contain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..errors import DegenerateParameterError


@dataclass(frozen=True)
class Palette:
    """Quantize to the active palette, loading ``source`` into it first when given."""

    source: Optional[str] = None

    def __str__(self) -> str:
        return "Palette" if self.source is None else f"Palette({self.source})"


@dataclass(frozen=True)
class Pixelate:
    block_size: int = 8

    def __post_init__(self) -> None:
        if isinstance(self.block_size, bool) or not isinstance(self.block_size, int):
            raise TypeError(f"Pixel size must be an integer, got {self.block_size!r}")
        if self.block_size <= 0:
            raise DegenerateParameterError(f"Pixel size must be positive, got {self.block_size}")

    def __str__(self) -> str:
        return f"Pixelate({self.block_size})"


@dataclass(frozen=True)
class Dither:
    def __str__(self) -> str:
        return "FloydSteinberg"


@dataclass(frozen=True)
class Invert:
    def __str__(self) -> str:
        return "Invert"


Operation = Union[Palette, Pixelate, Dither, Invert]
