from __future__ import annotations

import logging
import sys
from typing import List, Optional, Sequence, Tuple

from .config import SETTINGS, configure_logging
from .errors import DecodeError, DegenerateParameterError, EncodeError, UsageError
from .infrastructure.codec import decode, encode
from .processing.operations import Dither, Invert, Operation, Palette, Pixelate
from .processing.palette import DEFAULT_STORE, PaletteStore
from .processing.pipeline import PipelineExecutor

logger = logging.getLogger(__name__)

USAGE = """\
Usage: pixfilter [filter operations] input_path output_path
Filter operations:
  -pal          Apply the active palette
  -pal=SOURCE   Load a palette JSON file or URL, then apply it
  -pixpal       Apply pixelation (size {size}) and palette
  -pix=N        Apply pixelation with block size N
  -pix          Apply pixelation with block size {size}
  -floyd        Apply Floyd-Steinberg dithering
  -rev          Reverse (invert) colors
Example: pixfilter -pal -pix=4 -floyd input.png output.png"""


def usage() -> str:
    return USAGE.format(size=SETTINGS.pixel_size)


def _parse_pixel_size(value: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise UsageError(f"Invalid pixel size: {value}")
    size = int(value)
    if size <= 0:
        raise UsageError(f"Invalid pixel size: {value}")
    return size


def parse_operation(token: str) -> List[Operation]:
    """Translate one command line token into the operations it stands for."""

    if token == "-pal":
        return [Palette(SETTINGS.palette_source or None)]
    if token.startswith("-pal="):
        source = token[len("-pal="):]
        if not source:
            raise UsageError("Missing palette source after -pal=")
        return [Palette(source)]
    if token == "-pixpal":
        return [Pixelate(SETTINGS.pixel_size), Palette(SETTINGS.palette_source or None)]
    if token == "-pix":
        return [Pixelate(SETTINGS.pixel_size)]
    if token.startswith("-pix="):
        return [Pixelate(_parse_pixel_size(token[len("-pix="):]))]
    if token == "-floyd":
        return [Dither()]
    if token == "-rev":
        return [Invert()]
    raise UsageError(f"Unknown operation: {token}")


def parse_args(argv: Sequence[str]) -> Tuple[List[Operation], str, str]:
    if len(argv) < 2:
        raise UsageError("Missing input_path and output_path")

    *tokens, input_path, output_path = argv
    for path in (input_path, output_path):
        if path.startswith("-"):
            raise UsageError(f"Expected a path, got option {path}")

    operations: List[Operation] = []
    for token in tokens:
        try:
            operations.extend(parse_operation(token))
        except DegenerateParameterError as exc:
            raise UsageError(str(exc)) from exc
    if not operations:
        raise UsageError("No filter operations specified!")
    return operations, input_path, output_path


def run(
    argv: Sequence[str],
    store: PaletteStore = DEFAULT_STORE,
    executor: Optional[PipelineExecutor] = None,
) -> int:
    """Parse ``argv``, filter the input image and write the output.

    Returns a process exit status: 0 on success, 2 for usage errors and 1 when
    the image could not be read, processed or written.
    """

    if any(arg in ("-h", "--help") for arg in argv):
        print(usage())
        return 0

    try:
        operations, input_path, output_path = parse_args(argv)
    except UsageError as exc:
        print(f"{exc}\n{usage()}", file=sys.stderr)
        return 2

    try:
        source = decode(input_path)
    except DecodeError as exc:
        logger.error("%s", exc)
        return 1

    executor = executor or PipelineExecutor(store)
    try:
        result = executor.run(source, operations)
    except DegenerateParameterError as exc:
        logger.error("Pipeline aborted: %s", exc)
        return 1
    for label, seconds in result.timings:
        logger.debug("%s took %.3fs", label, seconds)

    try:
        encode(result.raster, output_path)
    except EncodeError as exc:
        logger.error("%s", exc)
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    return run(sys.argv[1:] if argv is None else list(argv))
