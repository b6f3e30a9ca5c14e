# wu_palette/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import MAX_INDEXED_COLORS
from .core_types import IndexImage, Lookups, U8Image

if TYPE_CHECKING:
    from .quantize import QuantizeResult

"""
Image I/O helpers: RGBA loading in sRGB and 8-bit palette PNG output.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except ImportError:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im.convert("RGBA"),
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is None:
                return im.convert("RGBA")
            return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            return im.convert("RGBA")

    return im.convert("RGBA")


def load_image_rgba(path: Path) -> U8Image:
    """Load any Pillow-readable image as uint8 (H, W, 4) RGBA in sRGB."""
    with Image.open(path) as im0:
        im = _convert_to_srgb_rgba(im0)
    return np.array(im, dtype=np.uint8)


def indexed_palette(lookups: Lookups, transparent_index: int) -> bytes:
    """
    Flat RGBA palette bytes for an indexed image: one entry per lookup slot
    (empty slots as transparent black) followed by the transparent slot.
    """
    out = bytearray()
    for px in lookups:
        out.extend(px.to_rgba() if px is not None else (0, 0, 0, 0))
    if transparent_index != len(lookups):
        raise ValueError("transparent slot must follow the lookups")
    out.extend((0, 0, 0, 0))
    return bytes(out)


def save_indexed_png(path: Path, indices: IndexImage, result: "QuantizeResult") -> Path:
    """
    Save mapped indices as an 8-bit palette PNG with per-entry alpha (tRNS).
    Forces a .png suffix. Returns the written path.
    """
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    n_entries = len(result.lookups) + 1
    if n_entries > MAX_INDEXED_COLORS:
        raise ValueError(
            f"palette has {n_entries} entries; indexed PNG holds at most {MAX_INDEXED_COLORS}"
        )
    if indices.ndim != 2:
        raise TypeError("expected (H,W) index image")
    im = Image.fromarray(indices.astype(np.uint8))
    im.putpalette(indexed_palette(result.lookups, result.transparent_index), rawmode="RGBA")
    im.save(path)
    return path


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "load_image_rgba",
    "indexed_palette",
    "save_indexed_png",
    "is_image_file",
]
