"""Image filter pipeline components."""

from .color import Color, distance
from .dither import dither, floyd_steinberg, to_luma
from .invert import invert
from .operations import Dither, Invert, Operation, Palette, Pixelate
from .palette import DEFAULT_STORE, NamedPalette, PaletteStore, nearest_color, quantize
from .pipeline import PipelineExecutor, PipelineResult, run_pipeline
from .pixelate import pixelate
from .raster import FullColor, Raster, Tone, promote

__all__ = [
    "Color",
    "distance",
    "dither",
    "floyd_steinberg",
    "to_luma",
    "invert",
    "Dither",
    "Invert",
    "Operation",
    "Palette",
    "Pixelate",
    "DEFAULT_STORE",
    "NamedPalette",
    "PaletteStore",
    "nearest_color",
    "quantize",
    "PipelineExecutor",
    "PipelineResult",
    "run_pipeline",
    "pixelate",
    "FullColor",
    "Raster",
    "Tone",
    "promote",
]
