import logging
import os
from dataclasses import dataclass
from typing import Tuple


APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class FilterSettings:
    log_level: str
    palette_source: str
    pixel_size: int
    lock_timeout: float
    fetch_timeout: float

    @classmethod
    def from_env(cls) -> "FilterSettings":
        return cls(
            log_level=os.getenv("PIXFILTER_LOG_LEVEL", "INFO").upper(),
            palette_source=os.getenv("PIXFILTER_PALETTE", ""),
            pixel_size=int(os.getenv("PIXFILTER_PIXEL_SIZE", "8")),
            lock_timeout=float(os.getenv("PIXFILTER_LOCK_TIMEOUT", "5.0")),
            fetch_timeout=float(os.getenv("PIXFILTER_FETCH_TIMEOUT", "10.0")),
        )


SETTINGS = FilterSettings.from_env()


DEFAULT_PALETTE: Tuple[Tuple[int, int, int], ...] = (
    (0, 0, 0),
    (255, 255, 255),
    (255, 0, 0),
    (0, 255, 0),
    (0, 0, 255),
    (255, 255, 0),
    (255, 0, 255),
    (0, 255, 255),
)

DITHER_THRESHOLD = 128


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level, format="%(levelname)s %(name)s: %(message)s")
    return logging.getLogger("pixfilter")
