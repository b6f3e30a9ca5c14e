# wu_palette/moments.py
from __future__ import annotations

"""
Colour moments: pixel count, per-channel sums and the sum of squared channels.

Moments are additive, so a region's moment can be built from a prefix table by
inclusion-exclusion. In arrays a moment is a row of MOMENT_FIELDS float64
values laid out as (weight, alpha, red, green, blue, sum_squares); integer sums
stay exact in float64 well past any realistic image size.
"""

from dataclasses import dataclass

import numpy as np

from .constants import (
    ALPHA_SUM,
    BLUE_SUM,
    GREEN_SUM,
    MOMENT_FIELDS,
    RED_SUM,
    SUM_SQUARES,
    WEIGHT,
)
from .core_types import Pixel


@dataclass(frozen=True)
class ColorMoment:
    """Aggregate statistics of a set of pixels."""

    weight: int = 0
    alpha: int = 0
    red: int = 0
    green: int = 0
    blue: int = 0
    sum_squares: float = 0.0

    @classmethod
    def of_pixel(cls, pixel: Pixel) -> "ColorMoment":
        a, r, g, b = (int(c) for c in pixel)
        return cls(1, a, r, g, b, float(a * a + r * r + g * g + b * b))

    @classmethod
    def from_row(cls, row: np.ndarray) -> "ColorMoment":
        """Build from a (MOMENT_FIELDS,) array row."""
        return cls(
            int(row[WEIGHT]),
            int(row[ALPHA_SUM]),
            int(row[RED_SUM]),
            int(row[GREEN_SUM]),
            int(row[BLUE_SUM]),
            float(row[SUM_SQUARES]),
        )

    def to_row(self) -> np.ndarray:
        row = np.zeros((MOMENT_FIELDS,), dtype=np.float64)
        row[WEIGHT] = self.weight
        row[ALPHA_SUM] = self.alpha
        row[RED_SUM] = self.red
        row[GREEN_SUM] = self.green
        row[BLUE_SUM] = self.blue
        row[SUM_SQUARES] = self.sum_squares
        return row

    def __add__(self, other: "ColorMoment") -> "ColorMoment":
        return ColorMoment(
            self.weight + other.weight,
            self.alpha + other.alpha,
            self.red + other.red,
            self.green + other.green,
            self.blue + other.blue,
            self.sum_squares + other.sum_squares,
        )

    def __sub__(self, other: "ColorMoment") -> "ColorMoment":
        return ColorMoment(
            self.weight - other.weight,
            self.alpha - other.alpha,
            self.red - other.red,
            self.green - other.green,
            self.blue - other.blue,
            self.sum_squares - other.sum_squares,
        )

    def amplitude(self) -> int:
        """Squared magnitude of the channel-sum vector."""
        return (
            self.alpha * self.alpha
            + self.red * self.red
            + self.green * self.green
            + self.blue * self.blue
        )

    def weighted_distance(self) -> float:
        if self.weight == 0:
            return 0.0
        return self.amplitude() / self.weight

    def variance(self) -> float:
        """Sum of squared deviations from the mean; 0.0 for an empty region."""
        if self.weight == 0:
            return 0.0
        return self.sum_squares - self.amplitude() / self.weight

    def mean(self) -> Pixel:
        """Truncated per-channel mean. Caller guarantees weight > 0."""
        w = self.weight
        return Pixel(self.alpha // w, self.red // w, self.green // w, self.blue // w)


def weighted_distance_rows(rows: np.ndarray) -> np.ndarray:
    """
    Vectorised ColorMoment.weighted_distance over (..., MOMENT_FIELDS) rows.
    Rows with zero weight score 0.0.
    """
    sums = rows[..., ALPHA_SUM : BLUE_SUM + 1]
    amplitude = np.sum(sums * sums, axis=-1)
    weight = rows[..., WEIGHT]
    out = np.zeros_like(weight)
    np.divide(amplitude, weight, out=out, where=weight != 0)
    return out


__all__ = ["ColorMoment", "weighted_distance_rows"]
