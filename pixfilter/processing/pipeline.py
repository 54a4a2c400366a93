from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Type

from ..errors import PaletteLoadError
from .dither import dither
from .invert import invert
from .operations import Dither, Invert, Operation, Palette, Pixelate
from .palette import DEFAULT_STORE, NamedPalette, PaletteStore, quantize
from .pixelate import pixelate
from .raster import FullColor, Raster, Tone, promote

logger = logging.getLogger(__name__)

PaletteLoader = Callable[[str], NamedPalette]


@dataclass
class PipelineResult:
    raster: Raster
    timings: List[Tuple[str, float]] = field(default_factory=list)

    @property
    def is_tone(self) -> bool:
        return isinstance(self.raster, Tone)


def _default_loader(source: str) -> NamedPalette:
    from ..infrastructure.palette_source import load_palette

    return load_palette(source)


class PipelineExecutor:
    """Runs an ordered list of operations over one image.

    The image is always either :class:`FullColor` or :class:`Tone`. Dither
    accepts both and yields Tone; every other step needs full color, so a Tone
    image is promoted before it runs:

    =========  ========================  =========
    state      operation                 new state
    =========  ========================  =========
    Tone       Palette/Pixelate/Invert   FullColor
    FullColor  Palette/Pixelate/Invert   FullColor
    FullColor  Dither                    Tone
    Tone       Dither                    Tone
    =========  ========================  =========
    """

    def __init__(
        self,
        store: PaletteStore = DEFAULT_STORE,
        palette_loader: Optional[PaletteLoader] = None,
    ) -> None:
        self.store = store
        self._load_palette = palette_loader or _default_loader
        self._full_color_steps: Dict[Type, Callable[[FullColor, Operation], FullColor]] = {
            Palette: self._apply_palette,
            Pixelate: lambda raster, op: pixelate(raster, op.block_size),
            Invert: lambda raster, op: invert(raster),
        }

    def _apply_palette(self, raster: FullColor, op: Palette) -> FullColor:
        if op.source:
            try:
                palette = self._load_palette(op.source)
            except PaletteLoadError as exc:
                logger.warning("Palette %s could not be loaded (%s); using the active palette", op.source, exc)
            else:
                if self.store.set_active(palette.colors):
                    logger.info("Loaded palette %r with %d colors", palette.name, len(palette.colors))
        return quantize(raster, self.store)

    def step(self, raster: Raster, op: Operation) -> Raster:
        if isinstance(op, Dither):
            return dither(raster)
        try:
            apply = self._full_color_steps[type(op)]
        except KeyError:
            raise TypeError(f"Unsupported operation: {op!r}") from None
        return apply(promote(raster), op)

    def run(self, raster: Raster, operations: Iterable[Operation]) -> PipelineResult:
        result = PipelineResult(raster)
        for op in operations:
            logger.info("Applying %s...", op)
            started = time.perf_counter()
            result.raster = self.step(result.raster, op)
            result.timings.append((str(op), time.perf_counter() - started))
        return result


def run_pipeline(
    raster: Raster,
    operations: Iterable[Operation],
    store: PaletteStore = DEFAULT_STORE,
) -> Raster:
    return PipelineExecutor(store).run(raster, operations).raster
