# wu_palette/mapping.py
from __future__ import annotations

"""
Pixel -> palette index mappers.

Both mappers share the PixelMapper signature (image, result) -> (H, W) int32 and
index into result.lookups. Pixels with alpha <= the threshold get
result.transparent_index.

- map_by_box_lookup: bucket each pixel and take the box that holds the bucket.
- map_nearest_rgba : nearest palette colour by squared RGBA distance.
"""

from typing import TYPE_CHECKING, Dict, Sequence, Tuple

import numpy as np

from .box import Box
from .constants import SIDE_SIZE
from .core_types import IndexImage, PixelMapper, U8Image, assert_u8_rgba_image
from .histogram import bucket_of, fade_alpha

if TYPE_CHECKING:
    from .quantize import QuantizeResult

_CHUNK = 4096


def tag_buckets(boxes: Sequence[Box]) -> np.ndarray:
    """int32 (33,33,33,33) array of the box index owning each bucket, -1 if none."""
    tags = np.full((SIDE_SIZE,) * 4, -1, dtype=np.int32)
    for i, box in enumerate(boxes):
        tags[
            box.alpha_min + 1 : box.alpha_max + 1,
            box.red_min + 1 : box.red_max + 1,
            box.green_min + 1 : box.green_max + 1,
            box.blue_min + 1 : box.blue_max + 1,
        ] = i
    return tags


def _visible_flat(image: U8Image, alpha_threshold: int) -> Tuple[np.ndarray, np.ndarray]:
    rgba = assert_u8_rgba_image(image).reshape(-1, 4)
    visible = rgba[:, 3].astype(np.int32) > int(alpha_threshold)
    return rgba, visible


def _slot_has_colour(result: "QuantizeResult") -> np.ndarray:
    # trailing False covers the transparent slot
    return np.array([px is not None for px in result.lookups] + [False], dtype=bool)


def map_by_box_lookup(image: U8Image, result: "QuantizeResult") -> IndexImage:
    """Direct bucket -> box lookup. Exact for every pixel the histogram counted."""
    opts = result.options
    rgba, visible = _visible_flat(image, opts.alpha_threshold)
    out = np.full(rgba.shape[0], result.transparent_index, dtype=np.int32)
    if np.any(visible):
        px = rgba[visible]
        tags = tag_buckets(result.boxes)
        slots = tags[
            bucket_of(fade_alpha(px[:, 3], opts.alpha_fader)),
            bucket_of(px[:, 0]),
            bucket_of(px[:, 1]),
            bucket_of(px[:, 2]),
        ]
        slots[slots < 0] = result.transparent_index
        slots[~_slot_has_colour(result)[slots]] = result.transparent_index
        out[visible] = slots
    return out.reshape(image.shape[:2])


def nearest_palette_indices(src_rgba: np.ndarray, pal_rgba: np.ndarray) -> np.ndarray:
    """For each source RGBA row, index of the nearest palette row (squared Euclidean)."""
    src = src_rgba.astype(np.int64)
    pal = pal_rgba.astype(np.int64)
    out = np.empty((src.shape[0],), dtype=np.int32)
    for start in range(0, src.shape[0], _CHUNK):
        diff = pal[None, :, :] - src[start : start + _CHUNK, None, :]
        dist2 = np.sum(diff * diff, axis=2)
        out[start : start + _CHUNK] = np.argmin(dist2, axis=1)
    return out


def map_nearest_rgba(image: U8Image, result: "QuantizeResult") -> IndexImage:
    """Linear scan over palette colours for each unique visible colour."""
    rgba, visible = _visible_flat(image, result.options.alpha_threshold)
    out = np.full(rgba.shape[0], result.transparent_index, dtype=np.int32)
    slots = np.flatnonzero(_slot_has_colour(result))
    if slots.size == 0 or not np.any(visible):
        return out.reshape(image.shape[:2])

    pal_rgba = np.array(
        [result.lookups[i].to_rgba() for i in slots.tolist()], dtype=np.uint8
    )
    uniques, inverse = np.unique(rgba[visible], axis=0, return_inverse=True)
    nearest = nearest_palette_indices(uniques, pal_rgba)
    out[visible] = slots[nearest][inverse.reshape(-1)]
    return out.reshape(image.shape[:2])


MAPPERS: Dict[str, PixelMapper] = {
    "lookup": map_by_box_lookup,
    "nearest": map_nearest_rgba,
}

__all__ = [
    "tag_buckets",
    "map_by_box_lookup",
    "nearest_palette_indices",
    "map_nearest_rgba",
    "MAPPERS",
]
