"""
BrushLib - Content-aware brush engine

This module provides the raster data model, brush masks, the eraser,
magic brush and pen tools, bilateral smoothing and the chunked area fill
orchestrator for Ghost Write.
"""

from GW_Libs.BrushLib.raster_models import (
    AnnotatedArea,
    ColorSample,
    PixelData,
    Point,
    RasterBuffer,
    RgbaColor,
    SelectionRect,
)
from GW_Libs.BrushLib.brush_mask import BrushMask, generate_brush_mask
from GW_Libs.BrushLib.pixel_access import get_pixel, in_bounds
from GW_Libs.BrushLib.coordinate_mapper import (
    DisplayRect,
    DisplaySurface,
    PointerEvent,
    TouchPoint,
    map_event_to_buffer_coords,
)
from GW_Libs.BrushLib.eraser import apply_eraser
from GW_Libs.BrushLib.magic_brush import apply_magic_brush_point
from GW_Libs.BrushLib.bilateral_filter import apply_bilateral_smoothing
from GW_Libs.BrushLib.area_fill import (
    AreaFillConfig,
    AreaFillError,
    AreaFillOperation,
    CancelToken,
    apply_area_fill,
    apply_area_fill_async,
    count_grid_points,
)
from GW_Libs.BrushLib.pen_tool import draw_pen_segment

__all__ = [
    "AnnotatedArea",
    "ColorSample",
    "PixelData",
    "Point",
    "RasterBuffer",
    "RgbaColor",
    "SelectionRect",
    "BrushMask",
    "generate_brush_mask",
    "get_pixel",
    "in_bounds",
    "DisplayRect",
    "DisplaySurface",
    "PointerEvent",
    "TouchPoint",
    "map_event_to_buffer_coords",
    "apply_eraser",
    "apply_magic_brush_point",
    "apply_bilateral_smoothing",
    "AreaFillConfig",
    "AreaFillError",
    "AreaFillOperation",
    "CancelToken",
    "apply_area_fill",
    "apply_area_fill_async",
    "count_grid_points",
    "draw_pen_segment",
]
