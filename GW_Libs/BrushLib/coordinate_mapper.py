"""
Map pointer and touch positions from display space into buffer space.

Events and surfaces are duck-typed: an event exposes `client_x`, `client_y`
and an optional `touches` sequence; a surface exposes its buffer `width`
and `height` and a `bounding_rect()` giving its on-screen placement.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from GW_Libs.BrushLib.raster_models import Point


@dataclass(frozen=True)
class TouchPoint:
    client_x: float
    client_y: float


@dataclass(frozen=True)
class PointerEvent:
    client_x: float = 0.0
    client_y: float = 0.0
    touches: Optional[Sequence[TouchPoint]] = None


@dataclass(frozen=True)
class DisplayRect:
    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class DisplaySurface:
    """A buffer of `width` x `height` pixels shown inside `rect`."""
    width: int
    height: int
    rect: DisplayRect

    def bounding_rect(self) -> DisplayRect:
        return self.rect


def map_event_to_buffer_coords(event: Any, surface: Any) -> Point:
    """
    Convert an input event position to buffer coordinates.

    The first touch point is used when the event carries touches.

    Args:
        event: Pointer or touch event
        surface: Rendering surface the event occurred on

    Returns:
        Point in buffer coordinate space

    Raises:
        ValueError: If the surface is displayed with zero width or height
    """
    rect = surface.bounding_rect()
    if rect.width <= 0 or rect.height <= 0:
        raise ValueError(f"Surface has no display area: {rect.width}x{rect.height}")

    scale_x = surface.width / rect.width
    scale_y = surface.height / rect.height

    touches = getattr(event, "touches", None)
    source = touches[0] if touches else event

    return Point(
        (source.client_x - rect.left) * scale_x,
        (source.client_y - rect.top) * scale_y,
    )
