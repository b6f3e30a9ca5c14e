# wu_palette/histogram.py
from __future__ import annotations

"""
Quantised 4-D colour histogram and its cumulative (prefix-sum) transform.

Buckets are addressed (alpha, red, green, blue), each axis in [0, 32]. Pixels land
in [1, 32] via (channel >> 3) + 1; level 0 is the boundary plane used by
inclusion-exclusion, plus the single synthetic default pixel at [0, 0, 0, 0].
"""

from typing import Optional, Tuple

import numpy as np

from .constants import (
    ALPHA_SUM,
    BLUE_SUM,
    CHANNEL_SHIFT,
    GREEN_SUM,
    MAX_SIDE_INDEX,
    MOMENT_FIELDS,
    OPAQUE_ALPHA,
    RED_SUM,
    SIDE_SIZE,
    SUM_SQUARES,
    WEIGHT,
)
from .core_types import BucketIndex, MomentTable, Pixel, U8Image, assert_u8_rgba_image
from .moments import ColorMoment

_SHAPE: Tuple[int, int, int, int] = (SIDE_SIZE, SIDE_SIZE, SIDE_SIZE, SIDE_SIZE)


def fade_alpha(alpha: np.ndarray, alpha_fader: int) -> np.ndarray:
    """
    Bias translucent alpha values up by (alpha % fader), capped at 255.
    Opaque values pass through unchanged. Returns int32.
    """
    a = alpha.astype(np.int32, copy=False)
    faded = np.minimum(a + a % int(alpha_fader), OPAQUE_ALPHA)
    return np.where(a < OPAQUE_ALPHA, faded, a).astype(np.int32, copy=False)


def bucket_of(channel: np.ndarray) -> np.ndarray:
    """Channel value(s) 0..255 -> bucket index 1..32."""
    return (np.asarray(channel, dtype=np.int32) >> CHANNEL_SHIFT) + 1


class Histogram:
    """
    Dense moment histogram over the quantised ARGB cube.

    Lifecycle: add pixels (additive only), then calculate_moments() once. After
    that the array is a cumulative table and is treated as read-only.
    """

    def __init__(self) -> None:
        self.moments: MomentTable = np.zeros(_SHAPE + (MOMENT_FIELDS,), dtype=np.float64)
        self.cumulative = False

    def clear(self) -> None:
        self.moments.fill(0.0)
        self.cumulative = False

    def _check_raw(self) -> None:
        if self.cumulative:
            raise RuntimeError("histogram already transformed to cumulative moments")

    def add_pixels(
        self, image: U8Image, alpha_threshold: int = 0, alpha_fader: int = 1
    ) -> int:
        """
        Accumulate every pixel with alpha > alpha_threshold.

        The bucket uses the faded alpha; the moment sums use the pixel's own
        channel values. Returns the number of pixels accumulated.
        """
        self._check_raw()
        if alpha_fader < 1:
            raise ValueError("alpha_fader must be >= 1")
        rgba = assert_u8_rgba_image(image).reshape(-1, 4)
        visible = rgba[:, 3].astype(np.int32) > int(alpha_threshold)
        px = rgba[visible].astype(np.int64)
        if px.shape[0] == 0:
            return 0

        red, green, blue, alpha = px[:, 0], px[:, 1], px[:, 2], px[:, 3]
        flat = np.ravel_multi_index(
            (
                bucket_of(fade_alpha(alpha, alpha_fader)),
                bucket_of(red),
                bucket_of(green),
                bucket_of(blue),
            ),
            _SHAPE,
        )
        size = SIDE_SIZE**4
        view = self.moments.reshape(size, MOMENT_FIELDS)
        view[:, WEIGHT] += np.bincount(flat, minlength=size)
        view[:, ALPHA_SUM] += np.bincount(flat, weights=alpha, minlength=size)
        view[:, RED_SUM] += np.bincount(flat, weights=red, minlength=size)
        view[:, GREEN_SUM] += np.bincount(flat, weights=green, minlength=size)
        view[:, BLUE_SUM] += np.bincount(flat, weights=blue, minlength=size)
        squares = alpha * alpha + red * red + green * green + blue * blue
        view[:, SUM_SQUARES] += np.bincount(flat, weights=squares, minlength=size)
        return int(px.shape[0])

    def add_pixel(self, index: BucketIndex, pixel: Pixel) -> None:
        """Add one pixel's moment into an explicit bucket."""
        self._check_raw()
        check_bucket_index(index)
        self.moments[index] += ColorMoment.of_pixel(pixel).to_row()

    def add_default_pixel(self) -> None:
        """Seed [0,0,0,0] with one transparent black pixel."""
        self.add_pixel((0, 0, 0, 0), Pixel(0, 0, 0, 0))

    def calculate_moments(self) -> None:
        """
        Turn raw buckets into a 4-D prefix-sum table over indices 1..32.

        Running sums go blue, green, red, then alpha, each low-to-high. Cells with
        a zero index on any axis keep their raw value.
        """
        self._check_raw()
        inner = self.moments[1:, 1:, 1:, 1:]
        for axis in (3, 2, 1, 0):
            inner[...] = np.cumsum(inner, axis=axis)
        self.cumulative = True

    def moment_at(self, index: BucketIndex) -> ColorMoment:
        check_bucket_index(index)
        return ColorMoment.from_row(self.moments[index])

    def total(self) -> ColorMoment:
        """Sum of all raw buckets. Only meaningful before calculate_moments()."""
        self._check_raw()
        return ColorMoment.from_row(self.moments.reshape(-1, MOMENT_FIELDS).sum(axis=0))

    def populated_buckets(self) -> int:
        """Number of raw buckets with non-zero weight."""
        self._check_raw()
        return int(np.count_nonzero(self.moments[..., WEIGHT]))


def check_bucket_index(index: BucketIndex) -> None:
    if len(index) != 4 or any(not 0 <= int(i) <= MAX_SIDE_INDEX for i in index):
        raise ValueError(f"bucket index out of range [0, {MAX_SIDE_INDEX}]: {index}")


def build_histogram(
    image: U8Image,
    alpha_threshold: int = 0,
    alpha_fader: int = 1,
    histogram: Optional[Histogram] = None,
) -> Tuple[Histogram, int]:
    """
    Fill a (new or cleared) histogram from an RGBA image and add the default pixel.

    Returns (histogram, visible_pixel_count).
    """
    if histogram is None:
        histogram = Histogram()
    else:
        histogram.clear()
    visible = histogram.add_pixels(image, alpha_threshold, alpha_fader)
    histogram.add_default_pixel()
    return histogram, visible


__all__ = [
    "Histogram",
    "build_histogram",
    "check_bucket_index",
    "fade_alpha",
    "bucket_of",
]
