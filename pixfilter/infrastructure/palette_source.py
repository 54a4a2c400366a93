from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Mapping
from urllib.parse import urlsplit

import requests

from ..config import APP_VERSION, SETTINGS
from ..errors import PaletteLoadError
from ..processing.color import Color
from ..processing.palette import NamedPalette


SessionFactory = Callable[[], requests.Session]


def _is_url(source: str) -> bool:
    return urlsplit(source).scheme in ("http", "https")


def _parse_color(raw: Any, index: int) -> Color:
    if not isinstance(raw, (list, tuple)) or len(raw) != 3:
        raise PaletteLoadError(f"Color #{index} must be an [r, g, b] triple, got {raw!r}")
    channels = []
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
            raise PaletteLoadError(f"Color #{index} has a channel outside 0..255: {raw!r}")
        channels.append(value)
    return Color(*channels)


def parse_palette(document: Mapping[str, Any]) -> NamedPalette:
    """Validate a decoded palette document.

    The document must be an object with a text ``name``, a text
    ``description`` and a non-empty ``colors`` list of ``[r, g, b]`` triples.
    """

    if not isinstance(document, Mapping):
        raise PaletteLoadError("Palette document must be a JSON object")

    name = document.get("name")
    description = document.get("description")
    raw_colors = document.get("colors")
    if not isinstance(name, str):
        raise PaletteLoadError("Palette 'name' must be a string")
    if not isinstance(description, str):
        raise PaletteLoadError("Palette 'description' must be a string")
    if not isinstance(raw_colors, list):
        raise PaletteLoadError("Palette 'colors' must be a list")
    if not raw_colors:
        raise PaletteLoadError(f"Palette {name!r} has no colors")

    colors = tuple(_parse_color(raw, index) for index, raw in enumerate(raw_colors))
    return NamedPalette(name=name, description=description, colors=colors)


class PaletteFetcher:
    """Loads palette documents from local files or ``http(s)`` URLs."""

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory or requests.Session
        self._session: requests.Session | None = None

    def _get_session(self) -> requests.Session:
        if self._session is None:
            session = self._session_factory()
            session.headers.update({"User-Agent": f"pixfilter/{APP_VERSION}"})
            self._session = session
        return self._session

    def _read_url(self, url: str) -> Any:
        try:
            response = self._get_session().get(url, timeout=SETTINGS.fetch_timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise PaletteLoadError(f"Failed to fetch palette {url}: {exc}") from exc
        except ValueError as exc:
            raise PaletteLoadError(f"Palette {url} is not valid JSON: {exc}") from exc

    @staticmethod
    def _read_file(path: str) -> Any:
        try:
            with open(path, encoding="utf-8") as handle:
                return json.load(handle)
        except OSError as exc:
            raise PaletteLoadError(f"Failed to read palette {path}: {exc}") from exc
        except ValueError as exc:
            raise PaletteLoadError(f"Palette {path} is not valid JSON: {exc}") from exc

    def load(self, source: str) -> NamedPalette:
        document = self._read_url(source) if _is_url(source) else self._read_file(source)
        return parse_palette(document)


FETCHER = PaletteFetcher()


def load_palette(source: str) -> NamedPalette:
    return FETCHER.load(source)


def dump_palette(palette: NamedPalette, path: str | Path) -> None:
    document = {
        "name": palette.name,
        "description": palette.description,
        "colors": [list(color) for color in palette.colors],
    }
    Path(path).write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
