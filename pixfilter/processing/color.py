from __future__ import annotations

from typing import NamedTuple


class Color(NamedTuple):
    r: int
    g: int
    b: int


def distance(a: Color, b: Color) -> int:
    """Squared Euclidean distance between two colors.

    No square root is taken: only the ordering of distances matters for
    nearest-color search, and integer arithmetic keeps ties exact.
    """

    dr = a[0] - b[0]
    dg = a[1] - b[1]
    db = a[2] - b[2]
    return dr * dr + dg * dg + db * db
