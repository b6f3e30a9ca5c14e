# wu_palette/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from typing import TYPE_CHECKING, Callable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from .quantize import QuantizeResult

# Basic aliases

RGBATuple = Tuple[int, int, int, int]  # Pillow channel order
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA
IndexImage = NDArray[np.int32]  # (H, W) palette indices
MomentTable = NDArray[np.float64]  # (33, 33, 33, 33, 6)
BucketIndex = Tuple[int, int, int, int]  # (alpha, red, green, blue)

# Value objects


class Pixel(NamedTuple):
    """One 32-bit colour, alpha first."""

    alpha: int
    red: int
    green: int
    blue: int

    def to_rgba(self) -> RGBATuple:
        return (self.red, self.green, self.blue, self.alpha)

    @classmethod
    def from_rgba(cls, rgba: Sequence[int]) -> "Pixel":
        return cls(int(rgba[3]), int(rgba[0]), int(rgba[1]), int(rgba[2]))


Lookups = List[Optional[Pixel]]  # one entry per box, None for empty boxes

# Small helpers


def pixel_to_hex(pixel: Pixel) -> HexStr:
    """Pixel to lowercase hex string '#rrggbbaa'."""
    return f"#{pixel.red:02x}{pixel.green:02x}{pixel.blue:02x}{pixel.alpha:02x}"


def hex_to_pixel(hex_str: str) -> Pixel:
    """Parse '#rrggbb' or '#rrggbbaa' (case-insensitive) into a Pixel."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        raise ValueError("hex must start with '#'")
    if len(s) == 7:
        s = f"{s}ff"
    if len(s) != 9:
        raise ValueError("hex must be '#rrggbb' or '#rrggbbaa'")
    return Pixel(int(s[7:9], 16), int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def pixels_to_array(rows: Sequence[Sequence[Pixel]]) -> U8Image:
    """
    Convert a grid of Pixel rows into a (H, W, 4) uint8 RGBA array.
    Every row must have the same length.
    """
    height = len(rows)
    width = len(rows[0]) if height else 0
    out = np.zeros((height, width, 4), dtype=np.uint8)
    for y, row in enumerate(rows):
        if len(row) != width:
            raise ValueError("pixel rows must all have the same length")
        for x, px in enumerate(row):
            out[y, x] = Pixel(*px).to_rgba()
    return out


def assert_u8_rgba_image(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,4) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 4:
        raise TypeError("expected uint8 (H,W,4) RGBA image")
    return image  # type: ignore[return-value]


# Callable signatures

# (rgba image, quantize result) -> (H, W) palette indices
PixelMapper = Callable[[U8Image, "QuantizeResult"], IndexImage]

__all__ = [
    # aliases / types
    "RGBATuple",
    "HexStr",
    "U8Image",
    "IndexImage",
    "MomentTable",
    "BucketIndex",
    "Lookups",
    # value objects
    "Pixel",
    # helpers
    "pixel_to_hex",
    "hex_to_pixel",
    "pixels_to_array",
    "assert_u8_rgba_image",
    # callable signatures
    "PixelMapper",
]
