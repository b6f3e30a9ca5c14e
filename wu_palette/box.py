# wu_palette/box.py
from __future__ import annotations

"""
Axis-aligned boxes in the quantised ARGB cube.

A box covers buckets (min, max] on every axis: the min plane is the exclusive
boundary used by the prefix-table corner lookups.
"""

from dataclasses import dataclass, field, replace
from typing import Tuple

from .constants import AXIS_NAMES, MAX_SIDE_INDEX


@dataclass(frozen=True)
class Box:
    alpha_min: int = 0
    alpha_max: int = MAX_SIDE_INDEX
    red_min: int = 0
    red_max: int = MAX_SIDE_INDEX
    green_min: int = 0
    green_max: int = MAX_SIDE_INDEX
    blue_min: int = 0
    blue_max: int = MAX_SIDE_INDEX
    size: int = field(init=False, compare=False)

    def __post_init__(self) -> None:
        for axis, (lo, hi) in enumerate(zip(self.lows, self.highs)):
            if not 0 <= lo < hi <= MAX_SIDE_INDEX:
                raise ValueError(
                    f"invalid {AXIS_NAMES[axis]} bounds ({lo}, {hi}); "
                    f"need 0 <= min < max <= {MAX_SIDE_INDEX}"
                )
        size = 1
        for lo, hi in zip(self.lows, self.highs):
            size *= hi - lo
        object.__setattr__(self, "size", size)

    @property
    def lows(self) -> Tuple[int, int, int, int]:
        return (self.alpha_min, self.red_min, self.green_min, self.blue_min)

    @property
    def highs(self) -> Tuple[int, int, int, int]:
        return (self.alpha_max, self.red_max, self.green_max, self.blue_max)

    def low(self, axis: int) -> int:
        return self.lows[axis]

    def high(self, axis: int) -> int:
        return self.highs[axis]

    def split(self, axis: int, position: int) -> Tuple["Box", "Box"]:
        """
        Split at a plane on one axis: (min, position] and (position, max].
        The other three axes are copied unchanged.
        """
        name = AXIS_NAMES[axis]
        lower = replace(self, **{f"{name}_max": position})
        upper = replace(self, **{f"{name}_min": position})
        return lower, upper

    def contains(self, index: Tuple[int, int, int, int]) -> bool:
        """True if the bucket index lies inside (min, max] on every axis."""
        return all(lo < i <= hi for i, lo, hi in zip(index, self.lows, self.highs))


WHOLE_CUBE = Box()

__all__ = ["Box", "WHOLE_CUBE"]
