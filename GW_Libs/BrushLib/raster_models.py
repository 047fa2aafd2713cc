"""
Raster editing data models for Ghost Write.

This module defines the core data structures shared by the brush operators,
the area fill orchestrator and the session layer.

Classes:
    RasterBuffer: RGBA pixel grid backed by a (height, width, 4) uint8 array
    Point: A position in buffer coordinate space
    SelectionRect: Rectangle selected for an area fill
    AnnotatedArea: Audit record of a completed edit
    ColorSample: Candidate color collected by the magic brush
    PixelData: Channel values and flat index of a single pixel

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, NamedTuple, Optional, Tuple

import numpy as np

from GW_Libs.pillow_compat import Image

RgbaColor = Tuple[int, int, int, int]


@dataclass
class RasterBuffer:
    """
    A width x height grid of RGBA pixels with 8-bit channels.

    The pixel array is owned by the buffer and mutated in place by the
    brush operators. A frozen buffer has a read-only array and is used as
    the immutable original snapshot of a page.
    """
    pixels: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.pixels, np.ndarray):
            raise TypeError(f"Expected numpy array, got {type(self.pixels)}")
        if self.pixels.dtype != np.uint8:
            raise TypeError(f"Expected uint8 pixels, got {self.pixels.dtype}")
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(
                f"Expected pixel array of shape (height, width, 4), got {self.pixels.shape}"
            )

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def is_frozen(self) -> bool:
        return not self.pixels.flags.writeable

    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        color: RgbaColor = (255, 255, 255, 255),
    ) -> "RasterBuffer":
        """Create a buffer filled with a single color."""
        if width < 1 or height < 1:
            raise ValueError(f"Buffer size must be positive, got {width}x{height}")
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = color
        return cls(pixels)

    @classmethod
    def from_image(cls, image: Any) -> "RasterBuffer":
        """
        Create a buffer from a PIL Image.

        Args:
            image: PIL Image in any mode (converted to RGBA)

        Returns:
            A new RasterBuffer holding a copy of the image pixels

        Raises:
            TypeError: If image is not a PIL Image
        """
        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        rgba = image.convert("RGBA")
        return cls(np.array(rgba, dtype=np.uint8))

    def to_image(self) -> Any:
        """Return the buffer contents as a new RGBA PIL Image."""
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    def copy(self) -> "RasterBuffer":
        """Return a writable deep copy of this buffer."""
        return RasterBuffer(self.pixels.copy())

    def freeze(self) -> "RasterBuffer":
        """Return a read-only copy of this buffer."""
        pixels = self.pixels.copy()
        pixels.flags.writeable = False
        return RasterBuffer(pixels)

    def same_size(self, other: "RasterBuffer") -> bool:
        return self.pixels.shape == other.pixels.shape

    def restore_from(self, other: "RasterBuffer") -> None:
        """Overwrite every pixel of this buffer with the pixels of `other`."""
        if not self.same_size(other):
            raise ValueError(
                f"Cannot restore {self.width}x{self.height} buffer "
                f"from {other.width}x{other.height} buffer"
            )
        np.copyto(self.pixels, other.pixels)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class SelectionRect:
    """Rectangle selected by dragging; normalized before use."""
    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def from_points(cls, start: Point, end: Point) -> "SelectionRect":
        return cls(start.x, start.y, end.x, end.y).normalized()

    def normalized(self) -> "SelectionRect":
        return SelectionRect(
            min(self.x1, self.x2),
            min(self.y1, self.y2),
            max(self.x1, self.x2),
            max(self.y1, self.y2),
        )

    @property
    def width(self) -> float:
        return abs(self.x2 - self.x1)

    @property
    def height(self) -> float:
        return abs(self.y2 - self.y1)

    def is_degenerate(self, min_size: float) -> bool:
        return self.width < min_size or self.height < min_size


@dataclass(frozen=True)
class AnnotatedArea:
    """Audit record of a completed edit operation on a page."""
    type: str
    x: float
    y: float
    x2: Optional[float] = None
    y2: Optional[float] = None
    radius: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting unset optional fields."""
        data: Dict[str, Any] = {"type": self.type, "x": self.x, "y": self.y}
        for key in ("x2", "y2", "radius"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


class ColorSample(NamedTuple):
    r: int
    g: int
    b: int
    similarity: int


class PixelData(NamedTuple):
    r: int
    g: int
    b: int
    a: int
    index: int
