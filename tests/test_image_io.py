"""Tests for Pillow load/save helpers."""

from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from wu_palette import QuantizeOptions, quantize_image
from wu_palette.core_types import Pixel
from wu_palette.image_io import (
    indexed_palette,
    is_image_file,
    load_image_rgba,
    save_indexed_png,
)
from wu_palette.quantize import QuantizeResult
from wu_palette.box import WHOLE_CUBE

from tests.conftest import rgba_image


def test_load_converts_to_rgba(tmp_path):
    path = tmp_path / "rgb.png"
    Image.new("RGB", (3, 2), (10, 20, 30)).save(path)
    rgba = load_image_rgba(path)
    assert rgba.shape == (2, 3, 4)
    assert rgba.dtype == np.uint8
    assert rgba[0, 0].tolist() == [10, 20, 30, 255]


def test_indexed_palette_layout():
    data = indexed_palette([Pixel(255, 1, 2, 3), None], 2)
    assert list(data) == [1, 2, 3, 255, 0, 0, 0, 0, 0, 0, 0, 0]
    with pytest.raises(ValueError):
        indexed_palette([Pixel(255, 1, 2, 3)], 5)


def test_save_round_trip(tmp_path, distinct_image):
    img = distinct_image.copy()
    img[0, 0] = (9, 9, 9, 0)
    indices, result = quantize_image(img)
    written = save_indexed_png(tmp_path / "out.bmp", indices, result)
    assert written.suffix == ".png"
    assert written.exists()

    with Image.open(written) as im:
        assert im.mode == "P"
        back = np.array(im.convert("RGBA"), dtype=np.uint8)
    assert back[0, 0, 3] == 0
    np.testing.assert_array_equal(back[1:], img[1:])


def test_save_rejects_oversized_palette(tmp_path):
    lookups = [Pixel(255, i % 256, 0, 0) for i in range(256)]
    result = QuantizeResult(QuantizeOptions(), [WHOLE_CUBE] * 256, lookups, 1)
    indices = np.zeros((1, 1), dtype=np.int32)
    with pytest.raises(ValueError):
        save_indexed_png(tmp_path / "big.png", indices, result)


def test_save_rejects_flat_indices(tmp_path):
    _indices, result = quantize_image(rgba_image([Pixel(255, 1, 2, 3)]))
    with pytest.raises(TypeError):
        save_indexed_png(tmp_path / "flat.png", np.zeros(4, dtype=np.int32), result)


def test_is_image_file(tmp_path):
    good = tmp_path / "a.png"
    Image.new("RGBA", (1, 1)).save(good)
    bad = tmp_path / "notes.txt"
    bad.write_text("not an image")
    assert is_image_file(good)
    assert not is_image_file(bad)
