"""
Circular brush footprints.

A brush mask is a flat (2*radius+1)^2 grid of 0/1 cells, row-major with
rows indexed by the vertical offset. It is regenerated whenever the brush
size changes and is otherwise immutable.
"""

import math
from dataclasses import dataclass
from functools import cached_property
from typing import Iterator, Tuple

import numpy as np


@dataclass(frozen=True)
class BrushMask:
    """Precomputed circular footprint for one brush size."""
    radius: int
    cells: Tuple[int, ...]

    @property
    def diameter(self) -> int:
        return 2 * self.radius + 1

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> int:
        return self.cells[index]

    def cell(self, i: int, j: int) -> int:
        """Value at vertical offset i and horizontal offset j from the center."""
        return self.cells[(i + self.radius) * self.diameter + (j + self.radius)]

    def offsets(self) -> Iterator[Tuple[int, int]]:
        """Yield (i, j) offsets of every cell inside the brush."""
        for i in range(-self.radius, self.radius + 1):
            for j in range(-self.radius, self.radius + 1):
                if self.cell(i, j):
                    yield i, j

    @cached_property
    def _array(self) -> np.ndarray:
        array = np.array(self.cells, dtype=bool).reshape(self.diameter, self.diameter)
        array.flags.writeable = False
        return array

    def as_array(self) -> np.ndarray:
        """Return the mask as a read-only boolean (diameter, diameter) array."""
        return self._array


def generate_brush_mask(brush_size: int) -> BrushMask:
    """
    Generate a circular brush mask for the given brush size.

    Args:
        brush_size: Brush diameter in pixels (>= 1)

    Returns:
        BrushMask with radius brush_size // 2

    Raises:
        ValueError: If brush_size < 1
    """
    brush_size = int(brush_size)
    if brush_size < 1:
        raise ValueError(f"brush_size must be >= 1, got {brush_size}")

    radius = brush_size // 2
    cells = []
    for i in range(-radius, radius + 1):
        for j in range(-radius, radius + 1):
            cells.append(0 if math.sqrt(i * i + j * j) > radius else 1)

    return BrushMask(radius=radius, cells=tuple(cells))
