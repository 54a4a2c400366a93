"""Exception types raised by the filter pipeline and its collaborators."""

from __future__ import annotations


class PixfilterError(Exception):
    """Base class for every error the command line reports to the user."""


class UsageError(PixfilterError):
    """Bad or missing command line arguments."""


class DecodeError(PixfilterError):
    """The input image could not be read."""


class EncodeError(PixfilterError):
    """The output image could not be written."""


class PaletteLoadError(PixfilterError):
    """A palette resource was missing, malformed or had no colors."""


class DegenerateParameterError(PixfilterError, ValueError):
    """An operation parameter would produce an empty intermediate raster."""
