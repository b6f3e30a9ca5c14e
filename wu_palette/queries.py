# wu_palette/queries.py
from __future__ import annotations

"""
Region queries over a cumulative moment table.

Exports:
- signed_corner_sum(table, corners) -> ndarray
- top(table, box, axis, position) -> ndarray
- bottom(table, box, axis) -> ndarray
- volume(table, box) -> ColorMoment

Notes:
- For a prefix table P, the sum over (lo, hi] on every axis is the sum of P at
  all 2^N corners, signed (-1)^(number of lo picks).
- top/bottom split that sum along one axis: top fixes the axis at a plane, bottom
  is the negated top at the box's own min plane. bottom + top(p) is the slab
  (min, p] of the box; bottom + top(max) is the whole box.
"""

import itertools
from typing import List, Sequence, Tuple, Union

import numpy as np

from .box import Box
from .constants import AXIS_COUNT
from .core_types import MomentTable
from .moments import ColorMoment

Index = Union[int, np.ndarray]


def _signed_choices(corner: Sequence[Index]) -> List[Tuple[Index, int]]:
    if len(corner) == 1:
        return [(corner[0], 1)]
    if len(corner) == 2:
        low, high = corner
        return [(high, 1), (low, -1)]
    raise ValueError("each axis needs (low, high) or a single fixed index")


def signed_corner_sum(table: np.ndarray, corners: Sequence[Sequence[Index]]) -> np.ndarray:
    """
    Inclusion-exclusion sum over the leading len(corners) axes of `table`.

    corners[i] is (low, high) for an axis summed over (low, high], or (index,) for
    an axis pinned at one plane. At most one entry may be an index array; the
    result then gains a leading dimension of that length.
    """
    total: np.ndarray | float = 0.0
    for picks in itertools.product(*(_signed_choices(c) for c in corners)):
        sign = 1
        index = []
        for idx, s in picks:
            sign *= s
            index.append(idx)
        total = total + sign * table[tuple(index)]
    return np.asarray(total)


def _box_corners(box: Box) -> List[Sequence[Index]]:
    return [(lo, hi) for lo, hi in zip(box.lows, box.highs)]


def top(table: MomentTable, box: Box, axis: int, position: Index) -> np.ndarray:
    """Moment rows with `axis` pinned at `position`, other axes at the box bounds."""
    corners = _box_corners(box)
    corners[axis] = (position,)
    return signed_corner_sum(table, corners)


def bottom(table: MomentTable, box: Box, axis: int) -> np.ndarray:
    """Negated top at the box's min plane on `axis`."""
    return -top(table, box, axis, box.low(axis))


def volume_row(table: MomentTable, box: Box) -> np.ndarray:
    """Total moment row of a box (16 corner terms)."""
    if table.ndim != AXIS_COUNT + 1:
        raise ValueError("expected a (33,33,33,33,fields) moment table")
    return signed_corner_sum(table, _box_corners(box))


def volume(table: MomentTable, box: Box) -> ColorMoment:
    return ColorMoment.from_row(volume_row(table, box))


__all__ = ["signed_corner_sum", "top", "bottom", "volume_row", "volume"]
