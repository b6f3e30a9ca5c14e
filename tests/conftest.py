"""Shared test fixtures."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np
import pytest

from wu_palette.core_types import Pixel
from wu_palette.histogram import Histogram, build_histogram


def rgba_image(pixels: Sequence[Pixel], width: int | None = None) -> np.ndarray:
    """Lay Pixels out row-major into a uint8 (H, W, 4) RGBA array."""
    width = width or len(pixels)
    height = (len(pixels) + width - 1) // width
    out = np.zeros((height, width, 4), dtype=np.uint8)
    for i, px in enumerate(pixels):
        out[i // width, i % width] = px.to_rgba()
    return out


# Distinct colours with every channel >= 8, so none shares the first bucket.
DISTINCT_COLOURS: List[Pixel] = [
    Pixel(255, 200, 30, 30),
    Pixel(255, 30, 200, 30),
    Pixel(255, 30, 30, 200),
    Pixel(128, 100, 100, 100),
    Pixel(255, 250, 250, 250),
]


@pytest.fixture
def random_image() -> np.ndarray:
    rng = np.random.default_rng(1234)
    img = rng.integers(0, 256, size=(24, 32, 4), dtype=np.uint8)
    # a band of fully opaque pixels and a band of fully transparent ones
    img[:4, :, 3] = 255
    img[-4:, :, 3] = 0
    return img


@pytest.fixture
def distinct_image() -> np.ndarray:
    pixels = []
    for i, px in enumerate(DISTINCT_COLOURS):
        pixels.extend([px] * (i + 2))
    return rgba_image(pixels, width=5)


@pytest.fixture
def two_colour_table() -> np.ndarray:
    """Cumulative table for 10 x (255,40,0,0) and 10 x (255,200,0,0)."""
    img = rgba_image([Pixel(255, 40, 0, 0)] * 10 + [Pixel(255, 200, 0, 0)] * 10)
    hist, _ = build_histogram(img)
    hist.calculate_moments()
    return hist.moments


@pytest.fixture
def random_histogram(random_image: np.ndarray) -> Histogram:
    hist, _ = build_histogram(random_image)
    return hist
