"""
Editing session for a single page.

A PageEditSession owns the original/working RasterBuffer pair of one page
and routes pointer input to the brush tools:

- start_drawing / draw / stop_drawing follow a pointer drag
- cancel_drawing abandons the drag and any running area fill, restoring
  the snapshot taken when the selection started; finished edits are kept

Eraser and magic brush input is throttled to about 60 applications per
second, area fill triggering to about 3 per second. An area selection
released inside the area fill interval is dropped rather than queued. New
input is ignored while an area fill is running.
"""

import logging
import random
import time
from typing import Any, Callable, Optional, Union

from GW_Libs.BrushLib.area_fill import AreaFillConfig, AreaFillError, AreaFillOperation
from GW_Libs.BrushLib.eraser import apply_eraser
from GW_Libs.BrushLib.magic_brush import apply_magic_brush_point
from GW_Libs.BrushLib.pen_tool import draw_pen_segment
from GW_Libs.BrushLib.raster_models import AnnotatedArea, Point, RasterBuffer, SelectionRect
from GW_Libs.SessionLib.annotation_state import AnnotationState
from GW_Libs.SessionLib.throttle import Throttle
from GW_Libs.constants import (
    AREA_FILL_THROTTLE_INTERVAL,
    BRUSH_THROTTLE_INTERVAL,
    TOOL_AREA_MAGIC_BRUSH,
    TOOL_MAGIC_BRUSH,
    TOOL_PEN,
)

logger = logging.getLogger(__name__)


class PageEditSession:
    """
    Example:
        >>> session = PageEditSession(Image.open("page-001.png"))
        >>> session.state.handle_tool_change("area-magic-brush")
        >>> session.start_drawing(Point(40, 40))
        >>> session.draw(Point(180, 90))
        >>> session.stop_drawing()
        AnnotatedArea(type='area-magic-brush', x=40, y=40, x2=180, y2=90, radius=None)
    """

    def __init__(
        self,
        source: Union[RasterBuffer, Any],
        state: Optional[AnnotationState] = None,
        rng: Optional[random.Random] = None,
        config: Optional[AreaFillConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        buffer = source if isinstance(source, RasterBuffer) else RasterBuffer.from_image(source)
        self.original = buffer.freeze()
        self.working = buffer.copy()
        self.state = state or AnnotationState()
        self.rng = rng
        self.config = config

        self._snapshot: Optional[RasterBuffer] = None
        self._operation: Optional[AreaFillOperation] = None
        self._last_position: Optional[Point] = None

        self._throttled_eraser = Throttle(self.erase, BRUSH_THROTTLE_INTERVAL, clock)
        self._throttled_brush = Throttle(self.apply_magic_brush, BRUSH_THROTTLE_INTERVAL, clock)
        self._throttled_area_fill = Throttle(self.run_area_fill, AREA_FILL_THROTTLE_INTERVAL, clock)

    @property
    def is_busy(self) -> bool:
        return self.state.is_processing_area

    @property
    def has_edits(self) -> bool:
        return bool(self.state.annotated_areas)

    def to_image(self) -> Any:
        return self.working.to_image()

    def reset(self) -> None:
        """Discard every edit on this page."""
        self.cancel_drawing()
        self.working.restore_from(self.original)
        self.state.clear_annotations()

    # ------------------------------------------------------------------
    # Direct tool application
    # ------------------------------------------------------------------

    def erase(self, point: Point) -> Optional[AnnotatedArea]:
        area = apply_eraser(
            point.x,
            point.y,
            self.working,
            self.original,
            self.state.brush_mask,
            self.state.brush_size,
        )
        if area is not None:
            self.state.add_annotated_area(area)
        return area

    def apply_magic_brush(self, point: Point) -> AnnotatedArea:
        apply_magic_brush_point(
            point.x,
            point.y,
            self.working,
            self.original,
            self.state.brush_mask,
            self.state.brush_size,
            rng=self.rng,
        )
        area = AnnotatedArea(
            type=TOOL_MAGIC_BRUSH, x=point.x, y=point.y, radius=self.state.brush_size / 2
        )
        self.state.add_annotated_area(area)
        return area

    def draw_pen(self, start: Point, end: Point) -> None:
        draw_pen_segment(self.working, start, end, self.state.brush_size)

    # ------------------------------------------------------------------
    # Area fill
    # ------------------------------------------------------------------

    def begin_area_fill(self, rect: Optional[SelectionRect] = None) -> Optional[AreaFillOperation]:
        """
        Prepare an area fill over `rect` (default: the current selection).

        The caller drives the returned operation; completion, progress and
        failure are recorded on this session's state.

        Returns:
            The operation, or None when there is no selection or it is too small

        Raises:
            RuntimeError: If another area fill is in progress
        """
        if self.is_busy:
            raise RuntimeError("An area fill is already in progress on this page")

        rect = rect or self.state.selection_rect()
        if rect is None:
            return None

        operation = AreaFillOperation(
            rect,
            self.working,
            self.original,
            self.state.brush_size,
            on_progress=self.state.set_progress,
            on_complete=self._complete_area_fill,
            rng=self.rng,
            config=self.config,
        )
        if operation.is_degenerate:
            logger.debug("Selection too small for an area fill, discarding it")
            self._snapshot = None
            self.state.reset_area_selection()
            return None

        if self._snapshot is None:
            self._snapshot = self.working.copy()
        self.state.is_processing_area = True
        self._operation = operation
        return operation

    def run_area_fill(self, rect: Optional[SelectionRect] = None) -> Optional[AnnotatedArea]:
        """
        Run an area fill to completion.

        On failure the page is restored to its pre-fill snapshot before the
        AreaFillError propagates.
        """
        operation = self.begin_area_fill(rect)
        if operation is None:
            return None
        try:
            return operation.run()
        except AreaFillError:
            self._fail_area_fill()
            raise

    async def run_area_fill_async(
        self, rect: Optional[SelectionRect] = None
    ) -> Optional[AnnotatedArea]:
        """Asyncio variant of run_area_fill; cancel_drawing may run between chunks."""
        operation = self.begin_area_fill(rect)
        if operation is None:
            return None
        try:
            return await operation.run_async()
        except AreaFillError:
            self._fail_area_fill()
            raise

    def _complete_area_fill(self, area: AnnotatedArea) -> None:
        self.state.add_annotated_area(area)
        self._end_area_fill()

    def _fail_area_fill(self) -> None:
        logger.error("Area fill failed, restoring page from snapshot")
        if self._snapshot is not None:
            self.working.restore_from(self._snapshot)
        self._end_area_fill()

    def _discard_selection(self) -> None:
        self._snapshot = None
        self.state.reset_area_selection()

    def _end_area_fill(self) -> None:
        self.state.is_processing_area = False
        self.state.set_progress(0)
        self._discard_selection()
        self._operation = None

    # ------------------------------------------------------------------
    # Pointer drag handling
    # ------------------------------------------------------------------

    def start_drawing(self, point: Point) -> None:
        if self.is_busy:
            logger.debug("Input ignored while an area fill is in progress")
            return

        self.state.is_drawing = True
        self._last_position = point

        if self.state.is_erasing or self.state.tool != TOOL_AREA_MAGIC_BRUSH:
            self._discard_selection()

        if self.state.is_erasing:
            self._throttled_eraser(point)
        elif self.state.tool == TOOL_MAGIC_BRUSH:
            self._throttled_brush(point)
        elif self.state.tool == TOOL_AREA_MAGIC_BRUSH:
            self._snapshot = self.working.copy()
            self.state.area_start = point
            self.state.area_end = point

    def draw(self, point: Point) -> None:
        if not self.state.is_drawing or self.is_busy:
            return

        if self.state.is_erasing:
            self._throttled_eraser(point)
        elif self.state.tool == TOOL_PEN and self._last_position is not None:
            self.draw_pen(self._last_position, point)
            self._last_position = point
        elif self.state.tool == TOOL_MAGIC_BRUSH:
            self._throttled_brush(point)
        elif self.state.tool == TOOL_AREA_MAGIC_BRUSH and self.state.area_start is not None:
            self.state.area_end = point

    def stop_drawing(self) -> Optional[AnnotatedArea]:
        """
        Finish the current drag.

        Returns:
            The pen or area fill record produced by the drag, if any
        """
        if not self.state.is_drawing:
            return None

        self._throttled_eraser.flush()
        self._throttled_brush.flush()

        result = None
        tool = None if self.state.is_erasing else self.state.tool
        if tool == TOOL_PEN and self._last_position is not None:
            result = AnnotatedArea(type=TOOL_PEN, x=self._last_position.x, y=self._last_position.y)
            self.state.add_annotated_area(result)

        self._last_position = None
        self.state.is_drawing = False

        if tool == TOOL_AREA_MAGIC_BRUSH:
            result = self._throttled_area_fill()
            if self._throttled_area_fill.has_pending:
                logger.debug("Area selection dropped: released too soon after the previous fill")
                self._throttled_area_fill.cancel()
                self._discard_selection()
        return result

    def cancel_drawing(self) -> None:
        """Abandon the current drag and any running fill, restoring the snapshot."""
        selecting = self.state.is_drawing and self.state.area_start is not None
        in_flight = self._operation is not None
        if in_flight:
            self._operation.cancel()
        self._throttled_eraser.cancel()
        self._throttled_brush.cancel()
        self._throttled_area_fill.cancel()

        if (selecting or in_flight) and self._snapshot is not None:
            self.working.restore_from(self._snapshot)

        self._last_position = None
        self.state.is_drawing = False
        self._end_area_fill()
