"""
Area fill orchestrator for the magic brush.

Tiles a selected rectangle with a grid of brush centers, applies the magic
brush at every center in chunks, reports progress after each chunk, then
smooths the seams with a bilateral pass.

The chunk loop is an explicit generator (`AreaFillOperation.iter_chunks`):
each step processes one chunk and yields the progress value, which is the
only point where the operation suspends. `apply_area_fill` drives it to
completion synchronously and `apply_area_fill_async` yields to the asyncio
event loop between chunks.

The fill is not transactional. When a chunk raises, chunks already applied
stay in the working buffer; callers that need atomicity snapshot the buffer
first (see PageEditSession).

Example:
    >>> original = RasterBuffer.from_image(Image.open("page.png")).freeze()
    >>> working = original.copy()
    >>> area = apply_area_fill(
    ...     SelectionRect(100, 80, 260, 140),
    ...     working,
    ...     original,
    ...     brush_size=20,
    ...     on_progress=lambda percent: print(f"{percent}%"),
    ... )
    >>> area.type
    'area-magic-brush'
"""

import asyncio
import logging
import math
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

from GW_Libs.BrushLib.bilateral_filter import apply_bilateral_smoothing
from GW_Libs.BrushLib.brush_mask import generate_brush_mask
from GW_Libs.BrushLib.magic_brush import apply_magic_brush_point
from GW_Libs.BrushLib.pixel_access import round_half_up
from GW_Libs.BrushLib.raster_models import (
    AnnotatedArea,
    Point,
    RasterBuffer,
    SelectionRect,
)
from GW_Libs.constants import (
    COLOR_SIGMA,
    GRID_SIZE_DIVISOR,
    MIN_GRID_SIZE,
    MIN_SELECTION_SIZE,
    PROCESSING_CHUNK_SIZE,
    SMOOTHING_KERNEL_SIZE,
    SMOOTHING_PADDING,
    TOOL_AREA_MAGIC_BRUSH,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]
CompleteCallback = Callable[[AnnotatedArea], None]


class AreaFillError(RuntimeError):
    """Raised when a chunk fails part way through an area fill."""


class CancelToken:
    """Cooperative cancellation signal checked before each chunk."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass
class AreaFillConfig:
    """Configuration for area fill execution.

    Attributes:
        chunk_size: Brush centers processed between suspension points
        min_selection_size: Selections narrower or shorter than this are ignored
        min_grid_size: Lower bound for the spacing between brush centers
        smoothing_padding: Pixels smoothed around the selection after the fill
        smoothing_kernel_size: Bilateral kernel size
        color_sigma: Bilateral color falloff
    """
    chunk_size: int = PROCESSING_CHUNK_SIZE
    min_selection_size: int = MIN_SELECTION_SIZE
    min_grid_size: int = MIN_GRID_SIZE
    smoothing_padding: int = SMOOTHING_PADDING
    smoothing_kernel_size: int = SMOOTHING_KERNEL_SIZE
    color_sigma: float = COLOR_SIGMA

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "chunk_size": self.chunk_size,
            "min_selection_size": self.min_selection_size,
            "min_grid_size": self.min_grid_size,
            "smoothing_padding": self.smoothing_padding,
            "smoothing_kernel_size": self.smoothing_kernel_size,
            "color_sigma": self.color_sigma,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AreaFillConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                   if k in cls.__dataclass_fields__}
        return cls(**filtered)


def compute_grid_size(brush_size: int, min_grid_size: int = MIN_GRID_SIZE) -> int:
    """Spacing between brush centers: a third of the brush, at least min_grid_size."""
    return max(int(brush_size) // GRID_SIZE_DIVISOR, min_grid_size)


def count_grid_points(width: int, height: int, grid_size: int) -> int:
    """Number of grid intersections, both edges included, in a width x height rect."""
    return (int(width) // grid_size + 1) * (int(height) // grid_size + 1)


def build_grid_points(rect: SelectionRect, grid_size: int) -> List[Point]:
    """
    Row-major brush centers covering `rect`.

    Args:
        rect: Normalized rectangle with integer corners
        grid_size: Spacing between centers (> 0)

    Returns:
        Points (x1 + i*g, y1 + j*g) with x <= x2 and y <= y2
    """
    if grid_size < 1:
        raise ValueError(f"grid_size must be >= 1, got {grid_size}")

    x1, y1, x2, y2 = int(rect.x1), int(rect.y1), int(rect.x2), int(rect.y2)
    return [
        Point(x, y)
        for y in range(y1, y2 + 1, grid_size)
        for x in range(x1, x2 + 1, grid_size)
    ]


def _round_rect(rect: SelectionRect) -> SelectionRect:
    rect = rect.normalized()
    return SelectionRect(
        round_half_up(rect.x1),
        round_half_up(rect.y1),
        round_half_up(rect.x2),
        round_half_up(rect.y2),
    )


class AreaFillOperation:
    """
    One cancellable magic-brush fill over a rectangle.

    Example:
        >>> operation = AreaFillOperation(rect, working, original, brush_size=20)
        >>> for percent in operation.iter_chunks():
        ...     repaint(working)
        ...     if user_pressed_escape():
        ...         operation.cancel()
    """

    def __init__(
        self,
        rect: SelectionRect,
        working: RasterBuffer,
        original: RasterBuffer,
        brush_size: int,
        on_progress: Optional[ProgressCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
        cancel_token: Optional[CancelToken] = None,
        rng: Optional[random.Random] = None,
        config: Optional[AreaFillConfig] = None,
    ) -> None:
        if brush_size < 1:
            raise ValueError(f"brush_size must be >= 1, got {brush_size}")
        if not working.same_size(original):
            raise ValueError(
                f"Working buffer {working.size} does not match original {original.size}"
            )

        self.config = config or AreaFillConfig()
        if self.config.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.config.chunk_size}")

        self.selection = rect.normalized()
        self.rect = _round_rect(rect)
        self.working = working
        self.original = original
        self.brush_size = int(brush_size)
        self.on_progress = on_progress
        self.on_complete = on_complete
        self.cancel_token = cancel_token or CancelToken()
        self.rng = rng or random.Random()

        self.grid_size = compute_grid_size(self.brush_size, self.config.min_grid_size)
        self.points: List[Point] = [] if self.is_degenerate else build_grid_points(
            self.rect, self.grid_size
        )
        self.total_chunks = math.ceil(len(self.points) / self.config.chunk_size)
        self.chunks_done = 0
        self.result: Optional[AnnotatedArea] = None
        self._cancelled = False

    @property
    def is_degenerate(self) -> bool:
        return self.selection.is_degenerate(self.config.min_selection_size)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def completed(self) -> bool:
        return self.result is not None

    def cancel(self) -> None:
        self.cancel_token.cancel()

    def _report(self, progress: int) -> None:
        if self.on_progress is not None:
            self.on_progress(progress)

    def _stop_if_cancelled(self) -> bool:
        if self.cancel_token.cancelled:
            self._cancelled = True
            logger.warning(
                f"Area fill cancelled after {self.chunks_done}/{self.total_chunks} chunks"
            )
            return True
        return False

    def _process_chunk(self, chunk: List[Point], mask: Any) -> None:
        for point in chunk:
            apply_magic_brush_point(
                point.x,
                point.y,
                self.working,
                self.original,
                mask,
                self.brush_size,
                rng=self.rng,
            )

    def iter_chunks(self) -> Iterator[int]:
        """
        Process the fill one chunk per step.

        Yields:
            Progress percentage after each chunk

        Raises:
            AreaFillError: If processing a chunk or the smoothing pass fails
        """
        if self.is_degenerate:
            logger.debug(
                f"Area fill skipped: selection {self.selection.width}x{self.selection.height} "
                f"is smaller than {self.config.min_selection_size}px"
            )
            return

        logger.debug(
            f"Area fill over ({self.rect.x1}, {self.rect.y1})-({self.rect.x2}, {self.rect.y2}): "
            f"{len(self.points)} points, grid {self.grid_size}, {self.total_chunks} chunks"
        )
        self._report(0)
        mask = generate_brush_mask(self.brush_size)
        chunk_size = self.config.chunk_size

        try:
            while self.chunks_done < self.total_chunks:
                if self._stop_if_cancelled():
                    return

                start = self.chunks_done * chunk_size
                self._process_chunk(self.points[start:start + chunk_size], mask)
                self.chunks_done += 1

                progress = min(100, round_half_up(self.chunks_done / self.total_chunks * 100))
                self._report(progress)
                yield progress

            if self._stop_if_cancelled():
                return

            apply_bilateral_smoothing(
                self.rect,
                self.working,
                padding=self.config.smoothing_padding,
                kernel_size=self.config.smoothing_kernel_size,
                color_sigma=self.config.color_sigma,
            )
        except Exception as e:
            logger.error(f"Area fill failed in chunk {self.chunks_done + 1}: {e}")
            self._report(0)
            raise AreaFillError(
                f"Error processing area fill chunk {self.chunks_done + 1}/{self.total_chunks}: {e}"
            ) from e

        self.result = AnnotatedArea(
            type=TOOL_AREA_MAGIC_BRUSH,
            x=self.rect.x1,
            y=self.rect.y1,
            x2=self.rect.x2,
            y2=self.rect.y2,
        )
        logger.info(f"Area fill completed: {len(self.points)} points in {self.total_chunks} chunks")
        if self.on_complete is not None:
            self.on_complete(self.result)

    def run(self) -> Optional[AnnotatedArea]:
        """Run every chunk synchronously; returns the record unless skipped or cancelled."""
        for _ in self.iter_chunks():
            pass
        return self.result

    async def run_async(self) -> Optional[AnnotatedArea]:
        """Run the fill, yielding to the event loop after every chunk."""
        for _ in self.iter_chunks():
            await asyncio.sleep(0)
        return self.result


def apply_area_fill(
    rect: SelectionRect,
    working: RasterBuffer,
    original: RasterBuffer,
    brush_size: int,
    on_progress: Optional[ProgressCallback] = None,
    on_complete: Optional[CompleteCallback] = None,
    cancel_token: Optional[CancelToken] = None,
    rng: Optional[random.Random] = None,
    config: Optional[AreaFillConfig] = None,
) -> Optional[AnnotatedArea]:
    """
    Fill `rect` with the magic brush and smooth the result.

    Args:
        rect: Selected rectangle (any corner order)
        working: Buffer mutated in place
        original: Page snapshot used as similarity reference
        brush_size: Brush diameter in pixels
        on_progress: Called with 0 before the first chunk and 0-100 after each chunk
        on_complete: Called with the AnnotatedArea after smoothing
        cancel_token: Checked before each chunk
        rng: Random source for the brush sampling
        config: Optional AreaFillConfig

    Returns:
        AnnotatedArea of type "area-magic-brush", or None when the selection
        is degenerate or the fill was cancelled

    Raises:
        AreaFillError: If a chunk fails; progress is reset to 0 first
    """
    operation = AreaFillOperation(
        rect, working, original, brush_size,
        on_progress=on_progress,
        on_complete=on_complete,
        cancel_token=cancel_token,
        rng=rng,
        config=config,
    )
    return operation.run()


async def apply_area_fill_async(
    rect: SelectionRect,
    working: RasterBuffer,
    original: RasterBuffer,
    brush_size: int,
    on_progress: Optional[ProgressCallback] = None,
    on_complete: Optional[CompleteCallback] = None,
    cancel_token: Optional[CancelToken] = None,
    rng: Optional[random.Random] = None,
    config: Optional[AreaFillConfig] = None,
) -> Optional[AnnotatedArea]:
    """Asyncio variant of apply_area_fill; yields to the loop between chunks."""
    operation = AreaFillOperation(
        rect, working, original, brush_size,
        on_progress=on_progress,
        on_complete=on_complete,
        cancel_token=cancel_token,
        rng=rng,
        config=config,
    )
    return await operation.run_async()
