"""
Tests for overlay_translator.core.sampler - background sampling and brightness.
"""
import numpy as np
import pytest

from overlay_translator.core.sampler import (
    WHITE,
    classify_brightness,
    rgb_string,
    sample_background,
    text_color_for,
)


@pytest.fixture
def raster():
    pixels = np.full((20, 30, 3), 255, dtype=np.uint8)
    pixels[5, 7] = (10, 20, 30)
    return pixels


class TestSampleBackground:
    def test_reads_top_left_pixel(self, raster):
        assert sample_background(raster, 7, 5, 10, 4) == (10, 20, 30)

    def test_fractional_coordinates_truncate(self, raster):
        assert sample_background(raster, 7.9, 5.6, 10, 4) == (10, 20, 30)

    @pytest.mark.parametrize("w,h", [(0, 5), (5, 0), (-1, 5)])
    def test_degenerate_box_is_white(self, raster, w, h):
        assert sample_background(raster, 7, 5, w, h) == WHITE

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (30, 0), (0, 20)])
    def test_out_of_bounds_is_white(self, raster, x, y):
        assert sample_background(raster, x, y, 5, 5) == WHITE

    def test_greyscale_raster(self):
        pixels = np.full((4, 4), 77, dtype=np.uint8)
        assert sample_background(pixels, 1, 1, 2, 2) == (77, 77, 77)


class TestBrightness:
    def test_dark(self):
        assert classify_brightness((10, 10, 10)) == "dark"
        assert text_color_for((10, 10, 10)) == "white"

    def test_light(self):
        assert classify_brightness((240, 240, 240)) == "light"
        assert text_color_for((240, 240, 240)) == "black"

    def test_average_of_exactly_128_is_light(self):
        assert classify_brightness((128, 128, 128)) == "light"
        assert classify_brightness((127, 128, 129)) == "light"

    def test_rgb_string(self):
        assert rgb_string((1, 2, 3)) == "rgb(1, 2, 3)"
