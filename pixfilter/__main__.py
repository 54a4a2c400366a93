"""Entry point for running the filter pipeline as a module."""

from __future__ import annotations

import sys

from .cli import main as run_cli


def main() -> None:
    """Run the command line filter and exit with its status."""
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
