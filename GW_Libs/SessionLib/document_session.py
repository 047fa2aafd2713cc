"""
Multi-page document editing session.

Tracks the workflow step (upload, annotate, export), the page editing
sessions of a loaded PDF and the page being edited. Tool settings follow
the user from page to page; annotations and buffers stay with their page.
"""

import logging
import random
from typing import Any, Iterable, List, Optional, Tuple

from GW_Libs.BrushLib.area_fill import AreaFillConfig
from GW_Libs.BrushLib.raster_models import AnnotatedArea
from GW_Libs.PdfLib.pdf_assembler import assemble_pdf
from GW_Libs.PdfLib.pdf_rasterizer import rasterize_pdf, validate_pdf_upload
from GW_Libs.SessionLib.page_session import PageEditSession
from GW_Libs.constants import (
    EXPORT_JPEG_QUALITY,
    RASTER_SCALE,
    STEP_ANNOTATE,
    STEP_EXPORT,
    STEP_UPLOAD,
)

logger = logging.getLogger(__name__)


class DocumentSession:
    def __init__(
        self,
        scale: float = RASTER_SCALE,
        rng: Optional[random.Random] = None,
        config: Optional[AreaFillConfig] = None,
    ) -> None:
        self.scale = scale
        self.rng = rng
        self.config = config
        self.step = STEP_UPLOAD
        self.progress = 0
        self.error: Optional[str] = None
        self.filename: Optional[str] = None
        self.pages: List[PageEditSession] = []
        self.current_page_index = 0

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def current_page(self) -> Optional[PageEditSession]:
        if not self.pages:
            return None
        return self.pages[self.current_page_index]

    def load_pdf(
        self,
        pdf_bytes: bytes,
        filename: str = "document.pdf",
        content_type: Optional[str] = None,
    ) -> int:
        """
        Validate and rasterize a PDF, replacing any loaded document.

        Returns:
            Number of pages available for editing

        Raises:
            PdfUploadError: If the upload is rejected
            PdfRasterizeError: If the PDF cannot be opened
            ValueError: If no page could be rendered
        """
        validate_pdf_upload(pdf_bytes, filename, content_type)
        buffers = rasterize_pdf(pdf_bytes, scale=self.scale)
        if not buffers:
            raise ValueError(f"No pages could be rendered from {filename}")

        self.filename = filename
        self.load_images(buffers)
        logger.info(f"Loaded {filename}: {self.page_count} pages")
        return self.page_count

    def load_images(self, images: Iterable[Any]) -> None:
        """Start editing pre-rendered page images (RasterBuffers or PIL Images)."""
        self.pages = [
            PageEditSession(image, rng=self.rng, config=self.config) for image in images
        ]
        self.current_page_index = 0
        self.error = None
        self.progress = 0
        self.step = STEP_ANNOTATE if self.pages else STEP_UPLOAD

    def navigate(self, index: int) -> bool:
        """
        Switch to another page; out-of-range indices are ignored.

        Returns:
            True if the current page changed
        """
        if not 0 <= index < self.page_count or index == self.current_page_index:
            return False

        previous = self.pages[self.current_page_index]
        previous.cancel_drawing()
        self.current_page_index = index
        self.pages[index].state.copy_tool_settings(previous.state)
        logger.debug(f"Navigated to page {index + 1}/{self.page_count}")
        return True

    def next_page(self) -> bool:
        return self.navigate(self.current_page_index + 1)

    def previous_page(self) -> bool:
        return self.navigate(self.current_page_index - 1)

    def annotated_areas(self, index: Optional[int] = None) -> List[AnnotatedArea]:
        page_index = self.current_page_index if index is None else index
        return list(self.pages[page_index].state.annotated_areas)

    def export_pdf(
        self,
        page_size: Optional[Tuple[float, float]] = None,
        jpeg_quality: int = EXPORT_JPEG_QUALITY,
    ) -> bytes:
        """
        Assemble every page into a PDF; edited pages use their working buffer.

        Raises:
            ValueError: If no document is loaded
        """
        if not self.pages:
            raise ValueError("No document loaded")

        self.error = None
        self.progress = 0
        self.step = STEP_EXPORT
        try:
            buffers = [
                page.working if page.has_edits else page.original for page in self.pages
            ]
            pdf_bytes = assemble_pdf(buffers, page_size=page_size, jpeg_quality=jpeg_quality)
        except Exception as e:
            logger.error(f"Error exporting PDF: {e}")
            self.error = str(e) or "Failed to export annotated PDF"
            raise
        finally:
            self.step = STEP_ANNOTATE

        self.progress = 100
        return pdf_bytes
