"""End-to-end tests for the quantizer pipeline."""

from __future__ import annotations

import numpy as np
import pytest

from wu_palette import QuantizeOptions, quantize_image, quantize_pixels
from wu_palette.core_types import Pixel

from tests.conftest import DISTINCT_COLOURS, rgba_image


class TestOptions:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"alpha_threshold": -1},
            {"alpha_threshold": 256},
            {"alpha_fader": 0},
            {"max_colors": 1},
        ],
    )
    def test_rejects_out_of_range(self, kwargs):
        with pytest.raises(ValueError):
            QuantizeOptions(**kwargs)

    def test_defaults(self):
        opts = QuantizeOptions()
        assert (opts.alpha_threshold, opts.alpha_fader, opts.max_colors) == (0, 1, 256)


class TestQuantizePixels:
    def test_single_pixel(self):
        result = quantize_pixels(rgba_image([Pixel(255, 10, 20, 30)]))
        assert result.palette == [Pixel(0, 0, 0, 0), Pixel(255, 10, 20, 30)]
        assert len(result.boxes) == 2
        assert result.transparent_index == 2
        assert result.visible_pixels == 1

    def test_fully_transparent(self):
        result = quantize_pixels(rgba_image([Pixel(0, 255, 255, 255)] * 9, width=3))
        assert result.palette == [Pixel(0, 0, 0, 0)]
        assert len(result.boxes) == 1
        assert result.visible_pixels == 0

    def test_palette_bounded_by_budget(self, random_image):
        for max_colors in (2, 5, 17, 256):
            result = quantize_pixels(random_image, QuantizeOptions(max_colors=max_colors))
            assert len(result.palette) <= max_colors - 1
            assert result.requested_colors == max_colors

    def test_palette_grows_with_budget(self, random_image):
        sizes = [
            len(quantize_pixels(random_image, QuantizeOptions(max_colors=n)).palette)
            for n in (2, 4, 16, 64)
        ]
        assert sizes == sorted(sizes)
        assert sizes[0] == 1

    def test_threshold_hides_faint_pixels(self):
        img = rgba_image([Pixel(40, 250, 0, 0)] * 4 + [Pixel(255, 0, 0, 250)] * 4)
        result = quantize_pixels(img, QuantizeOptions(alpha_threshold=40))
        assert result.visible_pixels == 4
        assert Pixel(255, 0, 0, 250) in result.palette
        assert all(px.red < 200 for px in result.palette)

    def test_debug_output(self, distinct_image, capsys):
        quantize_pixels(distinct_image, debug=True)
        out = capsys.readouterr().out
        assert "[debug] Pixels: 20" in out
        assert "Boxes: 6" in out

    def test_rejects_non_rgba(self):
        with pytest.raises(TypeError):
            quantize_pixels(np.zeros((4, 4, 3), dtype=np.uint8))


class TestQuantizeImage:
    def test_lookup_reproduces_distinct_colours(self, distinct_image):
        indices, result = quantize_image(distinct_image)
        assert indices.shape == distinct_image.shape[:2]
        for y in range(distinct_image.shape[0]):
            for x in range(distinct_image.shape[1]):
                src = Pixel.from_rgba(distinct_image[y, x])
                if src.alpha == 0:
                    assert indices[y, x] == result.transparent_index
                else:
                    assert result.lookups[indices[y, x]] == src

    def test_mappers_agree_on_distinct_colours(self, distinct_image):
        by_lookup, _ = quantize_image(distinct_image, mapper="lookup")
        by_nearest, _ = quantize_image(distinct_image, mapper="nearest")
        np.testing.assert_array_equal(by_lookup, by_nearest)

    def test_palette_covers_distinct_colours(self, distinct_image):
        _indices, result = quantize_image(distinct_image)
        assert set(result.palette) == set(DISTINCT_COLOURS) | {Pixel(0, 0, 0, 0)}

    def test_unknown_mapper(self, distinct_image):
        with pytest.raises(ValueError):
            quantize_image(distinct_image, mapper="dither")
