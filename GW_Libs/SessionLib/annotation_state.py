"""
Tool and annotation state for one page being edited.

Holds the current tool, brush size, in-progress selection, area fill
progress and the append-only list of AnnotatedArea records. The brush mask
is cached per brush size and regenerated whenever the size changes.
"""

import logging
from typing import List, Optional

from GW_Libs.BrushLib.brush_mask import BrushMask, generate_brush_mask
from GW_Libs.BrushLib.raster_models import AnnotatedArea, Point, SelectionRect
from GW_Libs.constants import DEFAULT_BRUSH_SIZE, TOOL_AREA_MAGIC_BRUSH, TOOL_ERASER, TOOLS

logger = logging.getLogger(__name__)


class AnnotationState:
    def __init__(
        self,
        tool: str = TOOL_AREA_MAGIC_BRUSH,
        brush_size: int = DEFAULT_BRUSH_SIZE,
    ) -> None:
        self.tool = self._validate_tool(tool)
        self._brush_size = self._validate_brush_size(brush_size)
        self._brush_mask: Optional[BrushMask] = None

        self.is_erasing = False
        self.is_drawing = False
        self.area_start: Optional[Point] = None
        self.area_end: Optional[Point] = None
        self.is_processing_area = False
        self.processing_progress = 0
        self.annotated_areas: List[AnnotatedArea] = []

    @staticmethod
    def _validate_tool(tool: str) -> str:
        if tool not in TOOLS:
            raise ValueError(f"Unknown tool: {tool}. Valid tools: {', '.join(TOOLS)}")
        return tool

    @staticmethod
    def _validate_brush_size(brush_size: int) -> int:
        brush_size = int(brush_size)
        if brush_size < 1:
            raise ValueError(f"brush_size must be >= 1, got {brush_size}")
        return brush_size

    @property
    def brush_size(self) -> int:
        return self._brush_size

    @brush_size.setter
    def brush_size(self, value: int) -> None:
        self.set_brush_size(value)

    @property
    def brush_mask(self) -> BrushMask:
        """Mask for the current brush size, rebuilt after every size change."""
        if self._brush_mask is None:
            self._brush_mask = generate_brush_mask(self._brush_size)
        return self._brush_mask

    def set_brush_size(self, brush_size: int) -> None:
        brush_size = self._validate_brush_size(brush_size)
        if brush_size != self._brush_size:
            self._brush_size = brush_size
            self._brush_mask = None
            logger.debug(f"Brush size set to {brush_size}")

    def set_progress(self, progress: int) -> None:
        self.processing_progress = int(progress)

    def handle_tool_change(self, tool: str) -> None:
        """Select a tool, leaving eraser mode and dropping any selection."""
        self.tool = self._validate_tool(tool)
        self.is_erasing = False
        self.reset_area_selection()

    def handle_erase_toggle(self) -> None:
        """Toggle eraser mode; enabling it also selects the eraser tool."""
        self.is_erasing = not self.is_erasing
        if self.is_erasing:
            self.tool = TOOL_ERASER
        self.reset_area_selection()

    def copy_tool_settings(self, other: "AnnotationState") -> None:
        """Adopt tool, eraser mode and brush size from another page's state."""
        self.tool = other.tool
        self.is_erasing = other.is_erasing
        self.set_brush_size(other.brush_size)

    def selection_rect(self) -> Optional[SelectionRect]:
        if self.area_start is None or self.area_end is None:
            return None
        return SelectionRect.from_points(self.area_start, self.area_end)

    def add_annotated_area(self, area: AnnotatedArea) -> None:
        self.annotated_areas.append(area)

    def reset_area_selection(self) -> None:
        self.area_start = None
        self.area_end = None

    def clear_annotations(self) -> None:
        self.annotated_areas = []
