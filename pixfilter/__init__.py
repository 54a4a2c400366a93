"""Application package exports."""

from . import infrastructure, processing
from .cli import main, run
from .config import APP_VERSION

__version__ = APP_VERSION

__all__ = ["APP_VERSION", "__version__", "infrastructure", "main", "processing", "run"]
