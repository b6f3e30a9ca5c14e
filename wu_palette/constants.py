"""
Histogram geometry and tunables used across the project.

- INDEX_BITS, SIDE_SIZE, MAX_SIDE_INDEX
- Axis ids (ALPHA, RED, GREEN, BLUE) in histogram order
- Defaults for the quantizer options
"""
from __future__ import annotations

from typing import Tuple

# =========================
# Histogram geometry
# =========================
INDEX_BITS: int = 5
CHANNEL_SHIFT: int = 8 - INDEX_BITS  # 3: keep the top 5 bits of a channel
SIDE_SIZE: int = (1 << INDEX_BITS) + 1  # 33 levels: 0 is the boundary level
MAX_SIDE_INDEX: int = SIDE_SIZE - 1  # 32
AXIS_COUNT: int = 4

# Moment field layout in the last dimension of histogram arrays.
WEIGHT: int = 0
ALPHA_SUM: int = 1
RED_SUM: int = 2
GREEN_SUM: int = 3
BLUE_SUM: int = 4
SUM_SQUARES: int = 5
MOMENT_FIELDS: int = 6

# =========================
# Axes (histogram order)
# =========================
ALPHA: int = 0
RED: int = 1
GREEN: int = 2
BLUE: int = 3
AXES: Tuple[int, int, int, int] = (ALPHA, RED, GREEN, BLUE)
AXIS_NAMES: Tuple[str, str, str, str] = ("alpha", "red", "green", "blue")

# =========================
# Quantizer defaults
# =========================
DEFAULT_ALPHA_THRESHOLD: int = 0
DEFAULT_ALPHA_FADER: int = 1
DEFAULT_MAX_COLORS: int = 256
OPAQUE_ALPHA: int = 255

# Largest palette an 8-bit indexed PNG can hold.
MAX_INDEXED_COLORS: int = 256

__all__ = [
    "INDEX_BITS",
    "CHANNEL_SHIFT",
    "SIDE_SIZE",
    "MAX_SIDE_INDEX",
    "AXIS_COUNT",
    "WEIGHT",
    "ALPHA_SUM",
    "RED_SUM",
    "GREEN_SUM",
    "BLUE_SUM",
    "SUM_SQUARES",
    "MOMENT_FIELDS",
    "ALPHA",
    "RED",
    "GREEN",
    "BLUE",
    "AXES",
    "AXIS_NAMES",
    "DEFAULT_ALPHA_THRESHOLD",
    "DEFAULT_ALPHA_FADER",
    "DEFAULT_MAX_COLORS",
    "OPAQUE_ALPHA",
    "MAX_INDEXED_COLORS",
]
