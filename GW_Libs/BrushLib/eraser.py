"""
Eraser tool: restore original pixels under the brush footprint.
"""

import logging
from typing import Optional

from GW_Libs.BrushLib.brush_mask import BrushMask
from GW_Libs.BrushLib.pixel_access import clip_footprint, round_half_up
from GW_Libs.BrushLib.raster_models import AnnotatedArea, RasterBuffer
from GW_Libs.constants import TOOL_ERASER

logger = logging.getLogger(__name__)


def apply_eraser(
    x: float,
    y: float,
    working: Optional[RasterBuffer],
    original: Optional[RasterBuffer],
    mask: Optional[BrushMask],
    brush_size: int,
) -> Optional[AnnotatedArea]:
    """
    Copy R,G,B from the original buffer into the working buffer inside the
    brush footprint centered on (x, y). Alpha is never modified.

    Args:
        x: Brush center column (buffer space, may be fractional)
        y: Brush center row
        working: Buffer being edited
        original: Snapshot taken at page load
        mask: Brush mask for brush_size
        brush_size: Brush diameter in pixels

    Returns:
        AnnotatedArea of type "eraser", or None if a buffer or the mask is missing
    """
    if working is None or original is None or mask is None:
        logger.debug("Eraser skipped: buffers or brush mask not initialized")
        return None

    if not working.same_size(original):
        raise ValueError(
            f"Working buffer {working.size} does not match original {original.size}"
        )

    footprint = clip_footprint(working, round_half_up(x), round_half_up(y), mask.radius)
    if footprint is not None:
        rows, cols, mask_rows, mask_cols = footprint
        inside = mask.as_array()[mask_rows, mask_cols]
        target = working.pixels[rows, cols]
        target[inside, :3] = original.pixels[rows, cols][inside, :3]

    return AnnotatedArea(type=TOOL_ERASER, x=x, y=y, radius=brush_size // 2)
