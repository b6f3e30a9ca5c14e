# wu_palette/quantize.py
from __future__ import annotations

"""
Quantizer pipeline.

Exports:
- QuantizeOptions(alpha_threshold=0, alpha_fader=1, max_colors=256)
- QuantizeResult
- quantize_pixels(image, options=None, *, debug=False) -> QuantizeResult
- quantize_image(image, options=None, *, mapper="lookup", debug=False) -> (indices, result)

Stages: histogram -> cumulative moments -> greedy box split -> mean colour per box.
"""

import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .box import Box
from .constants import (
    DEFAULT_ALPHA_FADER,
    DEFAULT_ALPHA_THRESHOLD,
    DEFAULT_MAX_COLORS,
    OPAQUE_ALPHA,
)
from .core_types import IndexImage, Lookups, Pixel, U8Image, assert_u8_rgba_image
from .histogram import build_histogram
from .lookups import build_lookups, compact_palette
from .mapping import MAPPERS
from .partition import split_boxes
from .utils import debug_log, format_duration, key_value_pairs_to_string


@dataclass(frozen=True)
class QuantizeOptions:
    alpha_threshold: int = DEFAULT_ALPHA_THRESHOLD
    alpha_fader: int = DEFAULT_ALPHA_FADER
    max_colors: int = DEFAULT_MAX_COLORS

    def __post_init__(self) -> None:
        if not 0 <= self.alpha_threshold <= OPAQUE_ALPHA:
            raise ValueError("alpha_threshold must be in 0..255")
        if self.alpha_fader < 1:
            raise ValueError("alpha_fader must be >= 1")
        if self.max_colors < 2:
            raise ValueError("max_colors must be >= 2")


@dataclass(frozen=True)
class QuantizeResult:
    """
    Boxes and their mean colours.

    lookups is aligned with boxes (None for boxes without pixels). Mappers index
    into lookups; index len(lookups) is the reserved transparent slot.
    """

    options: QuantizeOptions
    boxes: List[Box]
    lookups: Lookups
    visible_pixels: int

    @property
    def palette(self) -> List[Pixel]:
        return compact_palette(self.lookups)

    @property
    def transparent_index(self) -> int:
        return len(self.lookups)

    @property
    def requested_colors(self) -> int:
        return self.options.max_colors


def quantize_pixels(
    image: U8Image,
    options: Optional[QuantizeOptions] = None,
    *,
    debug: bool = False,
) -> QuantizeResult:
    """Build the Wu palette for an RGBA uint8 (H, W, 4) image."""
    options = options or QuantizeOptions()
    image = assert_u8_rgba_image(image)

    t0 = time.perf_counter()
    histogram, visible = build_histogram(
        image, options.alpha_threshold, options.alpha_fader
    )
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Pixels", int(image.shape[0] * image.shape[1])),
                    ("Visible", visible),
                    ("Buckets", histogram.populated_buckets()),
                ]
            )
        )
    histogram.calculate_moments()
    t1 = time.perf_counter()

    boxes = split_boxes(histogram.moments, options.max_colors, debug=debug)
    lookups = build_lookups(boxes, histogram.moments)
    t2 = time.perf_counter()

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Boxes", len(boxes)),
                    ("Palette", sum(px is not None for px in lookups)),
                    ("Histogram", format_duration(t1 - t0, precise=True)),
                    ("Partition", format_duration(t2 - t1, precise=True)),
                ]
            )
        )
    return QuantizeResult(options, boxes, lookups, visible)


def quantize_image(
    image: U8Image,
    options: Optional[QuantizeOptions] = None,
    *,
    mapper: str = "lookup",
    debug: bool = False,
) -> Tuple[IndexImage, QuantizeResult]:
    """Quantize and map every pixel to a palette index with the named mapper."""
    if mapper not in MAPPERS:
        raise ValueError(f"unknown mapper {mapper!r}; expected one of {sorted(MAPPERS)}")
    result = quantize_pixels(image, options, debug=debug)
    return MAPPERS[mapper](image, result), result


__all__ = ["QuantizeOptions", "QuantizeResult", "quantize_pixels", "quantize_image"]
