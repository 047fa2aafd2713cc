"""
Pixel-level access helpers for RasterBuffer.

get_pixel assumes valid coordinates; callers check in_bounds first.
"""

import math
from typing import Optional, Tuple

from GW_Libs.BrushLib.raster_models import PixelData, RasterBuffer


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding towards +infinity."""
    return int(math.floor(value + 0.5))


def in_bounds(buffer: RasterBuffer, x: int, y: int) -> bool:
    return 0 <= x < buffer.width and 0 <= y < buffer.height


def get_pixel(buffer: RasterBuffer, x: int, y: int) -> PixelData:
    """
    Read one RGBA pixel.

    Args:
        buffer: Buffer to read from
        x: Column, must satisfy 0 <= x < width
        y: Row, must satisfy 0 <= y < height

    Returns:
        PixelData with the channel values and flat byte index (y*width + x)*4
    """
    r, g, b, a = buffer.pixels[y, x]
    return PixelData(int(r), int(g), int(b), int(a), (y * buffer.width + x) * 4)


def set_pixel_rgb(buffer: RasterBuffer, x: int, y: int, rgb: Tuple[int, int, int]) -> None:
    """Write the R,G,B channels of one pixel, leaving alpha untouched."""
    buffer.pixels[y, x, :3] = rgb


def clip_footprint(
    buffer: RasterBuffer,
    center_x: int,
    center_y: int,
    radius: int,
) -> Optional[Tuple[slice, slice, slice, slice]]:
    """
    Clip a square footprint centered on a pixel to the buffer.

    Returns:
        (buffer_rows, buffer_cols, mask_rows, mask_cols) slices, or None when
        the footprint lies entirely outside the buffer
    """
    top = max(center_y - radius, 0)
    bottom = min(center_y + radius + 1, buffer.height)
    left = max(center_x - radius, 0)
    right = min(center_x + radius + 1, buffer.width)

    if top >= bottom or left >= right:
        return None

    mask_top = top - (center_y - radius)
    mask_left = left - (center_x - radius)
    return (
        slice(top, bottom),
        slice(left, right),
        slice(mask_top, mask_top + (bottom - top)),
        slice(mask_left, mask_left + (right - left)),
    )
