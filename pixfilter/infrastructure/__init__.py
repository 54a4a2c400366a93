"""Collaborators for image files and palette resources."""

from .codec import decode, encode
from .palette_source import FETCHER, PaletteFetcher, dump_palette, load_palette, parse_palette

__all__ = [
    "decode",
    "encode",
    "FETCHER",
    "PaletteFetcher",
    "dump_palette",
    "load_palette",
    "parse_palette",
]
