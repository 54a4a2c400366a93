from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

from PIL import Image

from ..config import DEFAULT_PALETTE, SETTINGS
from .color import Color, distance
from .raster import FullColor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamedPalette:
    """A palette resource as stored on disk: a label plus its ordered colors."""

    name: str
    description: str
    colors: Tuple[Color, ...]


class ReadWriteLock:
    """Many concurrent readers or one writer. Waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    def _wait(self, predicate, deadline: Optional[float]) -> bool:
        while not predicate():
            if deadline is None:
                self._cond.wait()
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            self._cond.wait(remaining)
        return True

    @staticmethod
    def _deadline(timeout: Optional[float]) -> Optional[float]:
        return None if timeout is None else time.monotonic() + timeout

    def acquire_read(self, timeout: Optional[float] = None) -> bool:
        deadline = self._deadline(timeout)
        if not self._cond.acquire(timeout=-1 if timeout is None else timeout):
            return False
        try:
            if not self._wait(lambda: not self._writing and not self._writers_waiting, deadline):
                return False
            self._readers += 1
            return True
        finally:
            self._cond.release()

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if not self._readers:
                self._cond.notify_all()

    def acquire_write(self, timeout: Optional[float] = None) -> bool:
        deadline = self._deadline(timeout)
        if not self._cond.acquire(timeout=-1 if timeout is None else timeout):
            return False
        try:
            self._writers_waiting += 1
            try:
                if not self._wait(lambda: not self._writing and not self._readers, deadline):
                    return False
            finally:
                self._writers_waiting -= 1
                # Readers held back by this writer may proceed if it gave up.
                self._cond.notify_all()
            self._writing = True
            return True
        finally:
            self._cond.release()

    def release_write(self) -> None:
        with self._cond:
            self._writing = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self, timeout: Optional[float] = None) -> Iterator[bool]:
        acquired = self.acquire_read(timeout)
        try:
            yield acquired
        finally:
            if acquired:
                self.release_read()

    @contextmanager
    def write_locked(self, timeout: Optional[float] = None) -> Iterator[bool]:
        acquired = self.acquire_write(timeout)
        try:
            yield acquired
        finally:
            if acquired:
                self.release_write()


def nearest_color(color: Color, colors: Sequence[Color]) -> Color:
    """Brute-force nearest entry of ``colors``; the first entry wins ties."""

    best = colors[0]
    best_distance = distance(color, best)
    for candidate in colors[1:]:
        candidate_distance = distance(color, candidate)
        if candidate_distance < best_distance:
            best = candidate
            best_distance = candidate_distance
    return best


class PaletteStore:
    """Holds the active palette used by every quantization pass.

    Reads run concurrently; :meth:`set_active` excludes all other access while
    it swaps the palette. When the lock cannot be acquired within
    ``lock_timeout`` seconds a warning is logged and the call degrades to
    identity behavior instead of raising.
    """

    def __init__(
        self,
        colors: Iterable[Sequence[int]] = DEFAULT_PALETTE,
        lock_timeout: Optional[float] = None,
    ) -> None:
        self._colors: Tuple[Color, ...] = tuple(Color(*rgb) for rgb in colors)
        self._lock = ReadWriteLock()
        self._lock_timeout = SETTINGS.lock_timeout if lock_timeout is None else lock_timeout

    def snapshot(self) -> Optional[Tuple[Color, ...]]:
        """Return the active palette, or ``None`` if the read lock was unavailable."""

        with self._lock.read_locked(self._lock_timeout) as acquired:
            if not acquired:
                logger.warning("Failed to acquire read lock for palette")
                return None
            return self._colors

    @property
    def colors(self) -> Tuple[Color, ...]:
        return self.snapshot() or ()

    def set_active(self, colors: Iterable[Sequence[int]]) -> bool:
        replacement = tuple(Color(*rgb) for rgb in colors)
        if not replacement:
            raise ValueError("Active palette must contain at least one color")
        with self._lock.write_locked(self._lock_timeout) as acquired:
            if not acquired:
                logger.warning("Failed to acquire write lock for palette; keeping current palette")
                return False
            self._colors = replacement
        logger.debug("Active palette replaced with %d colors", len(replacement))
        return True

    def reset(self) -> bool:
        return self.set_active(DEFAULT_PALETTE)

    def nearest(self, color: Sequence[int]) -> Color:
        color = Color(*color)
        palette = self.snapshot()
        if palette is None:
            return color
        if not palette:
            logger.warning("Active palette is empty; leaving color %s unchanged", tuple(color))
            return color
        return nearest_color(color, palette)


DEFAULT_STORE = PaletteStore()


def quantize(raster: FullColor, store: PaletteStore) -> FullColor:
    """Replace every pixel with its nearest color in the store's active palette.

    The palette is read once per pass so a concurrent replacement never mixes
    two palettes in one image. An empty active palette is first reset to the
    default colors.
    """

    palette = store.snapshot()
    if palette is None:
        return FullColor(raster.image.copy())
    if not palette:
        logger.warning("Active palette is empty; restoring the default palette")
        store.reset()
        palette = store.snapshot()
        if not palette:
            return FullColor(raster.image.copy())

    src = raster.image
    width, height = src.size
    lookup: Dict[Tuple[int, int, int], Tuple[int, int, int]] = {}
    for _, rgb in src.getcolors(maxcolors=max(1, width * height)) or ():
        lookup[rgb] = tuple(nearest_color(Color(*rgb), palette))

    out = Image.new("RGB", (width, height))
    src_pixels = src.load()
    dst_pixels = out.load()
    for y in range(height):
        for x in range(width):
            dst_pixels[x, y] = lookup[src_pixels[x, y]]
    return FullColor(out)
