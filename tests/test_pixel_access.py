"""
Tests for pixel reads, writes and footprint clipping.
"""

from GW_Libs.BrushLib.pixel_access import (
    clip_footprint,
    get_pixel,
    in_bounds,
    round_half_up,
    set_pixel_rgb,
)
from GW_Libs.BrushLib.raster_models import RasterBuffer


class TestPixelAccess:
    """Test pixel reads, writes and footprint clipping."""

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-0.5) == 0
        assert round_half_up(1.49) == 1
        assert round_half_up(-1.6) == -2

    def test_get_pixel_index(self):
        buffer = RasterBuffer.blank(10, 5, (1, 2, 3, 4))
        pixel = get_pixel(buffer, 3, 2)
        assert (pixel.r, pixel.g, pixel.b, pixel.a) == (1, 2, 3, 4)
        assert pixel.index == (2 * 10 + 3) * 4

    def test_in_bounds(self):
        buffer = RasterBuffer.blank(10, 5)
        assert in_bounds(buffer, 0, 0)
        assert in_bounds(buffer, 9, 4)
        assert not in_bounds(buffer, 10, 0)
        assert not in_bounds(buffer, 0, -1)

    def test_set_pixel_rgb_keeps_alpha(self):
        buffer = RasterBuffer.blank(4, 4, (255, 255, 255, 90))
        set_pixel_rgb(buffer, 1, 2, (10, 20, 30))
        assert tuple(buffer.pixels[2, 1]) == (10, 20, 30, 90)

    def test_clip_footprint_inside(self):
        buffer = RasterBuffer.blank(20, 20)
        rows, cols, mask_rows, mask_cols = clip_footprint(buffer, 10, 10, 3)
        assert (rows, cols) == (slice(7, 14), slice(7, 14))
        assert (mask_rows, mask_cols) == (slice(0, 7), slice(0, 7))

    def test_clip_footprint_at_corner(self):
        buffer = RasterBuffer.blank(20, 20)
        rows, cols, mask_rows, mask_cols = clip_footprint(buffer, 0, 0, 3)
        assert (rows, cols) == (slice(0, 4), slice(0, 4))
        assert (mask_rows, mask_cols) == (slice(3, 7), slice(3, 7))

    def test_clip_footprint_outside(self):
        buffer = RasterBuffer.blank(20, 20)
        assert clip_footprint(buffer, -10, 5, 3) is None
