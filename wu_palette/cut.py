# wu_palette/cut.py
from __future__ import annotations

"""
Cut search: best plane on one axis (maximize) and best axis for a box (cut).

The objective for a plane is weighted_distance(half) + weighted_distance(rest).
It ranks planes the same way as the variance reduction of the split, since the
whole-box term is constant for a given box.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .box import Box
from .constants import ALPHA, AXES, BLUE, GREEN, RED, WEIGHT
from .core_types import MomentTable
from .moments import ColorMoment, weighted_distance_rows
from .queries import bottom, top, volume


@dataclass(frozen=True)
class CutResult:
    """Best plane on one axis; position None means no plane leaves both sides non-empty."""

    position: Optional[int]
    value: float


NO_CUT = CutResult(None, 0.0)


def maximize(
    table: MomentTable,
    box: Box,
    axis: int,
    first: int,
    last: int,
    whole: ColorMoment,
) -> CutResult:
    """
    Scan planes first..last-1 on `axis` and keep the first one with the highest
    objective strictly above 0.0. Planes leaving either side empty are skipped.
    """
    if last <= first:
        return NO_CUT
    positions = np.arange(first, last, dtype=np.intp)
    halves = bottom(table, box, axis) + top(table, box, axis, positions)
    rests = whole.to_row() - halves

    scores = weighted_distance_rows(halves) + weighted_distance_rows(rests)
    valid = (halves[:, WEIGHT] != 0) & (rests[:, WEIGHT] != 0)
    scores = np.where(valid, scores, -np.inf)

    best = int(np.argmax(scores))
    if not scores[best] > 0.0:
        return NO_CUT
    return CutResult(int(positions[best]), float(scores[best]))


def best_cuts(table: MomentTable, box: Box) -> Tuple[CutResult, ...]:
    """maximize() on every axis, in ALPHA, RED, GREEN, BLUE order."""
    whole = volume(table, box)
    return tuple(
        maximize(table, box, axis, box.low(axis) + 1, box.high(axis), whole)
        for axis in AXES
    )


def choose_axis(cuts: Tuple[CutResult, ...]) -> int:
    """
    Axis with the largest value; ties go to the earlier axis in
    alpha > red > green > blue order.
    """
    a, r, g, b = (c.value for c in cuts)
    if a >= r and a >= g and a >= b:
        return ALPHA
    if r >= a and r >= g and r >= b:
        return RED
    if g >= a and g >= r and g >= b:
        return GREEN
    return BLUE


def cut(table: MomentTable, box: Box) -> Optional[Tuple[Box, Box]]:
    """
    Split a box at its best plane, or None when it cannot be split.

    When alpha wins the comparison but has no valid plane, the box is
    unsplittable; the other axes are not tried.
    """
    cuts = best_cuts(table, box)
    axis = choose_axis(cuts)
    position = cuts[axis].position
    if position is None:
        return None
    return box.split(axis, position)


__all__ = ["CutResult", "NO_CUT", "maximize", "best_cuts", "choose_axis", "cut"]
