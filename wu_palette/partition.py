# wu_palette/partition.py
from __future__ import annotations

"""
Greedy partitioning of the colour cube into at most max_colors - 1 boxes.
"""

from typing import List

from .box import WHOLE_CUBE, Box
from .constants import AXIS_NAMES
from .core_types import MomentTable
from .cut import cut
from .queries import volume
from .utils import debug_log


def box_variance(table: MomentTable, box: Box) -> float:
    """Variance of a box; single-bucket boxes count as 0.0 (nothing left to split)."""
    if box.size <= 1:
        return 0.0
    return volume(table, box).variance()


def _largest_variance(variances: List[float]) -> int:
    best_index = 0
    best = variances[0]
    for index in range(1, len(variances)):
        if variances[index] > best:
            best = variances[index]
            best_index = index
    return best_index


def split_boxes(table: MomentTable, max_colors: int, *, debug: bool = False) -> List[Box]:
    """
    Repeatedly cut the box with the largest variance.

    One colour slot is reserved, so at most max_colors - 1 boxes come back.
    Stops early, with fewer boxes, once no remaining box has positive variance.
    """
    if max_colors < 2:
        raise ValueError("max_colors must be >= 2")
    colour_count = max_colors - 1

    boxes: List[Box] = [WHOLE_CUBE]
    variances: List[float] = [0.0]
    next_index = 0
    failed_cuts = 0

    while len(boxes) < colour_count:
        target = boxes[next_index]
        halves = cut(table, target)
        if halves is not None:
            first, second = halves
            boxes[next_index] = first
            variances[next_index] = box_variance(table, first)
            boxes.append(second)
            variances.append(box_variance(table, second))
            if debug:
                axis = next(i for i, (a, b) in enumerate(zip(first.highs, target.highs)) if a != b)
                debug_log(
                    f"cut box {next_index} on {AXIS_NAMES[axis]} at {first.high(axis)} "
                    f"-> {len(boxes)} boxes"
                )
        else:
            variances[next_index] = 0.0
            failed_cuts += 1

        next_index = _largest_variance(variances)
        if variances[next_index] <= 0.0:
            break

    if debug and len(boxes) < colour_count:
        debug_log(
            f"partition stopped early: {len(boxes)} of {colour_count} boxes "
            f"({failed_cuts} unsplittable)"
        )
    return boxes


__all__ = ["box_variance", "split_boxes"]
