"""
Edge-preserving bilateral smoothing over a rectangular region.

Each pixel becomes the weighted average of its kernel neighborhood, where
the weight combines spatial closeness and color similarity to the center:

    weight = exp(-(dx^2 + dy^2) / (2 r^2)) * exp(-|dRGB|^2 / (2 sigma^2))

All weights are computed from the unmodified input and the results are
written back in one step, so a pass never reads its own output. Pixels
closer than the kernel radius to the buffer border are left unchanged.

Example:
    >>> buffer = RasterBuffer.from_image(Image.open("page.png"))
    >>> apply_bilateral_smoothing(SelectionRect(40, 40, 120, 90), buffer)
"""

import logging
from typing import Optional, Tuple

import numpy as np

from GW_Libs.BrushLib.raster_models import RasterBuffer, SelectionRect
from GW_Libs.constants import COLOR_SIGMA, SMOOTHING_KERNEL_SIZE, SMOOTHING_PADDING

logger = logging.getLogger(__name__)


def _filter_bounds(
    rect: SelectionRect,
    buffer: RasterBuffer,
    padding: int,
    radius: int,
) -> Optional[Tuple[int, int, int, int]]:
    """Inclusive (top, bottom, left, right) rows/columns of filtered centers."""
    rect = rect.normalized()
    top = max(radius, int(rect.y1) - padding)
    bottom = min(buffer.height - radius - 1, int(rect.y2) + padding)
    left = max(radius, int(rect.x1) - padding)
    right = min(buffer.width - radius - 1, int(rect.x2) + padding)

    if top > bottom or left > right:
        return None
    return top, bottom, left, right


def apply_bilateral_smoothing(
    rect: SelectionRect,
    buffer: RasterBuffer,
    padding: int = SMOOTHING_PADDING,
    kernel_size: int = SMOOTHING_KERNEL_SIZE,
    color_sigma: float = COLOR_SIGMA,
) -> None:
    """
    Smooth `rect` expanded by `padding` pixels, in place. Alpha is untouched.

    Args:
        rect: Region to smooth
        buffer: Buffer to modify
        padding: Extra pixels smoothed on every side of rect
        kernel_size: Square kernel size (>= 3); radius is kernel_size // 2
        color_sigma: Color similarity falloff

    Raises:
        ValueError: If kernel_size < 3 or color_sigma <= 0
    """
    if kernel_size < 3:
        raise ValueError(f"kernel_size must be >= 3, got {kernel_size}")
    if color_sigma <= 0:
        raise ValueError(f"color_sigma must be > 0, got {color_sigma}")

    radius = kernel_size // 2
    bounds = _filter_bounds(rect, buffer, padding, radius)
    if bounds is None:
        logger.debug("Bilateral smoothing skipped: region outside filterable area")
        return

    top, bottom, left, right = bounds
    source = buffer.pixels[:, :, :3].astype(np.float64)
    center = source[top:bottom + 1, left:right + 1]

    weighted_sum = np.zeros_like(center)
    total_weight = np.zeros(center.shape[:2], dtype=np.float64)
    spatial_denominator = 2.0 * radius * radius
    color_denominator = 2.0 * color_sigma * color_sigma

    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            neighbor = source[top + dy:bottom + 1 + dy, left + dx:right + 1 + dx]
            spatial_weight = np.exp(-(dx * dx + dy * dy) / spatial_denominator)
            color_distance = np.sum((neighbor - center) ** 2, axis=2)
            weight = spatial_weight * np.exp(-color_distance / color_denominator)

            weighted_sum += neighbor * weight[:, :, np.newaxis]
            total_weight += weight

    smoothed = np.floor(weighted_sum / total_weight[:, :, np.newaxis] + 0.5)
    buffer.pixels[top:bottom + 1, left:right + 1, :3] = np.clip(smoothed, 0, 255).astype(np.uint8)
