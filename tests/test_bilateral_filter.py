"""
Tests for edge-preserving bilateral smoothing.
"""

import numpy as np
import pytest

from GW_Libs.BrushLib.bilateral_filter import apply_bilateral_smoothing
from GW_Libs.BrushLib.raster_models import RasterBuffer, SelectionRect


class TestApplyBilateralSmoothing:

    def test_uniform_buffer_is_unchanged(self):
        buffer = RasterBuffer.blank(30, 30, (120, 60, 30, 255))
        apply_bilateral_smoothing(SelectionRect(0, 0, 29, 29), buffer)
        assert np.all(buffer.pixels == (120, 60, 30, 255))

    def test_pixels_away_from_edge_are_unchanged(self, hard_edge_buffer):
        before = hard_edge_buffer.pixels.copy()
        apply_bilateral_smoothing(SelectionRect(0, 0, 39, 19), hard_edge_buffer)

        np.testing.assert_array_equal(hard_edge_buffer.pixels[:, :18], before[:, :18])
        np.testing.assert_array_equal(hard_edge_buffer.pixels[:, 22:], before[:, 22:])

    def test_edge_stays_sharp(self, hard_edge_buffer):
        apply_bilateral_smoothing(SelectionRect(0, 0, 39, 19), hard_edge_buffer)

        dark = hard_edge_buffer.pixels[10, 19, 0]
        light = hard_edge_buffer.pixels[10, 20, 0]
        # a 5x5 box blur would put both sides at 102 and 153
        assert 0 < dark < 20
        assert 235 < light < 255

    def test_alpha_is_untouched(self, hard_edge_buffer):
        hard_edge_buffer.pixels[:, :, 3] = 123
        apply_bilateral_smoothing(SelectionRect(0, 0, 39, 19), hard_edge_buffer)
        assert np.all(hard_edge_buffer.pixels[:, :, 3] == 123)

    def test_only_padded_region_is_smoothed(self):
        buffer = RasterBuffer.blank(60, 20, (100, 100, 100, 255))
        buffer.pixels[::2, ::2, :3] = 110
        buffer.pixels[1::2, 1::2, :3] = 110
        before = buffer.pixels.copy()

        apply_bilateral_smoothing(SelectionRect(30, 5, 30, 5), buffer, padding=10)

        # columns 20..40 are filtered
        np.testing.assert_array_equal(buffer.pixels[:, :20], before[:, :20])
        np.testing.assert_array_equal(buffer.pixels[:, 41:], before[:, 41:])
        assert not np.array_equal(buffer.pixels[:, 20:41], before[:, 20:41])

    def test_border_pixels_are_unchanged(self):
        buffer = RasterBuffer.blank(20, 20, (100, 100, 100, 255))
        buffer.pixels[::2, :, :3] = 110
        before = buffer.pixels.copy()

        apply_bilateral_smoothing(SelectionRect(0, 0, 19, 19), buffer)

        np.testing.assert_array_equal(buffer.pixels[:2], before[:2])
        np.testing.assert_array_equal(buffer.pixels[-2:], before[-2:])
        np.testing.assert_array_equal(buffer.pixels[:, :2], before[:, :2])
        np.testing.assert_array_equal(buffer.pixels[:, -2:], before[:, -2:])

    def test_region_outside_buffer_is_a_no_op(self, hard_edge_buffer):
        before = hard_edge_buffer.pixels.copy()
        apply_bilateral_smoothing(SelectionRect(1000, 1000, 1010, 1010), hard_edge_buffer)
        np.testing.assert_array_equal(hard_edge_buffer.pixels, before)

    def test_invalid_parameters(self, hard_edge_buffer):
        with pytest.raises(ValueError):
            apply_bilateral_smoothing(SelectionRect(0, 0, 5, 5), hard_edge_buffer, kernel_size=1)
        with pytest.raises(ValueError):
            apply_bilateral_smoothing(SelectionRect(0, 0, 5, 5), hard_edge_buffer, color_sigma=0)
