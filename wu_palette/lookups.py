# wu_palette/lookups.py
from __future__ import annotations

"""
Palette construction: one mean colour per box.
"""

from typing import List, Sequence

from .box import Box
from .core_types import Lookups, MomentTable, Pixel
from .queries import volume


def build_lookups(boxes: Sequence[Box], table: MomentTable) -> Lookups:
    """
    Truncated mean colour of every box, aligned with `boxes`.
    Boxes holding no pixels get None.
    """
    lookups: Lookups = []
    for box in boxes:
        moment = volume(table, box)
        lookups.append(moment.mean() if moment.weight > 0 else None)
    return lookups


def compact_palette(lookups: Lookups) -> List[Pixel]:
    """Drop empty slots, keeping box order."""
    return [px for px in lookups if px is not None]


__all__ = ["build_lookups", "compact_palette"]
