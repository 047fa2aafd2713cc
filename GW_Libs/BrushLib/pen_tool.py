"""
Freehand pen strokes drawn onto a RasterBuffer with Pillow's ImageDraw.

Only the bounding box of each segment is copied out of the buffer, drawn
on, and written back.
"""

import math
from typing import List, Tuple

import numpy as np

from GW_Libs.BrushLib.raster_models import Point, RasterBuffer, RgbaColor
from GW_Libs.constants import DEFAULT_PEN_COLOR
from GW_Libs.pillow_compat import Image, ImageDraw


def interpolate_segment(start: Point, end: Point, brush_size: int) -> List[Point]:
    """
    Points along a segment, densified for long moves.

    Segments at least half a brush long are split into
    ceil(distance / (brush_size / 4)) steps so fast pointer moves leave no gaps.

    Returns:
        Points from start to end, both included
    """
    dx = end.x - start.x
    dy = end.y - start.y
    distance = math.hypot(dx, dy)

    if distance < brush_size / 2:
        return [start, end]

    steps = math.ceil(distance / (brush_size / 4))
    points = [Point(start.x + dx * i / steps, start.y + dy * i / steps) for i in range(steps)]
    points.append(end)
    return points


def _bounding_box(
    points: List[Point], reach: float, buffer: RasterBuffer
) -> Tuple[int, int, int, int]:
    left = max(0, int(math.floor(min(p.x for p in points) - reach)))
    top = max(0, int(math.floor(min(p.y for p in points) - reach)))
    right = min(buffer.width, int(math.ceil(max(p.x for p in points) + reach)) + 1)
    bottom = min(buffer.height, int(math.ceil(max(p.y for p in points) + reach)) + 1)
    return left, top, right, bottom


def draw_pen_segment(
    buffer: RasterBuffer,
    start: Point,
    end: Point,
    brush_size: int,
    color: RgbaColor = DEFAULT_PEN_COLOR,
) -> None:
    """
    Draw a round-capped line of width brush_size from start to end.

    Args:
        buffer: Buffer to draw on (mutated in place)
        start: Previous pointer position
        end: Current pointer position
        brush_size: Line width in pixels (>= 1)
        color: RGBA stroke color

    Raises:
        ValueError: If brush_size < 1
    """
    if brush_size < 1:
        raise ValueError(f"brush_size must be >= 1, got {brush_size}")

    points = interpolate_segment(start, end, brush_size)
    half_width = brush_size / 2
    left, top, right, bottom = _bounding_box(points, half_width + 1, buffer)
    if left >= right or top >= bottom:
        return

    patch = Image.fromarray(np.ascontiguousarray(buffer.pixels[top:bottom, left:right]))
    draw = ImageDraw.Draw(patch)
    local = [(p.x - left, p.y - top) for p in points]

    draw.line(local, fill=color, width=brush_size, joint="curve")
    for cap_x, cap_y in (local[0], local[-1]):
        draw.ellipse(
            (cap_x - half_width, cap_y - half_width, cap_x + half_width, cap_y + half_width),
            fill=color,
        )

    buffer.pixels[top:bottom, left:right] = np.asarray(patch)
