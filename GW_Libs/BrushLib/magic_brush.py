"""
Magic brush: content-aware fill at a single point.

Candidate colors are sampled on a jittered ring around the brush center,
ranked by how closely the original pixel at each sample matches the
original pixel at the center, and the best candidates are blended into the
brush footprint. Sampling is random on purpose so repeated strokes do not
produce a visible repeating texture; pass `rng` for reproducible output.
"""

import logging
import math
import random
from typing import List, Optional, Tuple

from GW_Libs.BrushLib.brush_mask import BrushMask, generate_brush_mask
from GW_Libs.BrushLib.pixel_access import (
    clip_footprint,
    get_pixel,
    in_bounds,
    round_half_up,
)
from GW_Libs.BrushLib.raster_models import ColorSample, RasterBuffer
from GW_Libs.constants import (
    MAGIC_BRUSH_ANGLE_JITTER,
    MAGIC_BRUSH_KEPT_SAMPLES,
    MAGIC_BRUSH_MIN_DISTANCE,
    MAGIC_BRUSH_SAMPLE_COUNT,
    MAGIC_BRUSH_SEARCH_FACTOR,
)

logger = logging.getLogger(__name__)


def sample_colors(
    x: float,
    y: float,
    working: RasterBuffer,
    original: RasterBuffer,
    brush_size: int,
    rng: random.Random,
) -> List[ColorSample]:
    """
    Collect candidate colors around (x, y).

    Colors are read from the working buffer; similarity is the sum of absolute
    R,G,B differences between the original pixel at the sample and the
    original pixel at the center. Out-of-bounds samples are skipped.

    Returns:
        Samples in collection order (unsorted)
    """
    center = get_pixel(original, round_half_up(x), round_half_up(y))
    search_radius = round_half_up(brush_size * MAGIC_BRUSH_SEARCH_FACTOR)

    samples: List[ColorSample] = []
    for k in range(MAGIC_BRUSH_SAMPLE_COUNT):
        angle = (k / MAGIC_BRUSH_SAMPLE_COUNT) * math.pi * 2 + rng.random() * MAGIC_BRUSH_ANGLE_JITTER
        distance = (
            rng.random() * (1.0 - MAGIC_BRUSH_MIN_DISTANCE) + MAGIC_BRUSH_MIN_DISTANCE
        ) * search_radius
        sample_x = round_half_up(x + math.cos(angle) * distance)
        sample_y = round_half_up(y + math.sin(angle) * distance)

        if not in_bounds(working, sample_x, sample_y):
            continue

        reference = get_pixel(original, sample_x, sample_y)
        similarity = (
            abs(reference.r - center.r)
            + abs(reference.g - center.g)
            + abs(reference.b - center.b)
        )
        current = get_pixel(working, sample_x, sample_y)
        samples.append(ColorSample(current.r, current.g, current.b, similarity))

    return samples


def blend_samples(samples: List[ColorSample]) -> Optional[Tuple[int, int, int]]:
    """
    Weighted average of samples with weight 1 / (similarity + 1).

    Returns:
        Rounded (r, g, b), or None when there are no samples
    """
    total_weight = 0.0
    weighted = [0.0, 0.0, 0.0]
    for sample in samples:
        weight = 1.0 / (sample.similarity + 1)
        total_weight += weight
        weighted[0] += sample.r * weight
        weighted[1] += sample.g * weight
        weighted[2] += sample.b * weight

    if total_weight <= 0:
        return None

    return tuple(
        min(255, max(0, round_half_up(channel / total_weight))) for channel in weighted
    )


def apply_magic_brush_point(
    x: float,
    y: float,
    working: Optional[RasterBuffer],
    original: Optional[RasterBuffer],
    mask: Optional[BrushMask],
    brush_size: int,
    rng: Optional[random.Random] = None,
) -> None:
    """
    Paint a blend of similar nearby colors into the brush footprint at (x, y).

    The working buffer is mutated in place; alpha is left untouched. The
    operator does nothing when a buffer is missing or the center lies
    outside the buffer.

    Args:
        x: Brush center column (buffer space)
        y: Brush center row
        working: Buffer being edited
        original: Snapshot taken at page load, used as similarity reference
        mask: Brush mask for brush_size (generated when None)
        brush_size: Brush diameter in pixels
        rng: Random source; a freshly seeded one is used when None
    """
    if working is None or original is None:
        logger.debug("Magic brush skipped: buffers not initialized")
        return

    center_x = round_half_up(x)
    center_y = round_half_up(y)
    if not in_bounds(original, center_x, center_y):
        return

    if mask is None:
        mask = generate_brush_mask(brush_size)
    if rng is None:
        rng = random.Random()

    samples = sample_colors(x, y, working, original, brush_size, rng)
    samples.sort(key=lambda sample: sample.similarity)
    color = blend_samples(samples[:MAGIC_BRUSH_KEPT_SAMPLES])
    if color is None:
        return

    footprint = clip_footprint(working, center_x, center_y, mask.radius)
    if footprint is None:
        return

    rows, cols, mask_rows, mask_cols = footprint
    inside = mask.as_array()[mask_rows, mask_cols]
    working.pixels[rows, cols][inside, :3] = color
