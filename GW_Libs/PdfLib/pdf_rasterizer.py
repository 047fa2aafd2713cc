"""
PDF upload validation and page rasterization.

Pages are rendered with PyMuPDF at a fixed zoom onto an opaque white
background and returned as RasterBuffers, one per page.

Functions:
    validate_pdf_upload: Reject uploads that are empty, oversized or not PDFs
    rasterize_pdf: Render every page of a PDF to a RasterBuffer
"""

import logging
from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF

from GW_Libs.BrushLib.raster_models import RasterBuffer
from GW_Libs.constants import (
    MAX_UPLOAD_SIZE,
    PDF_CONTENT_TYPE,
    PDF_EXTENSION,
    PDF_MAGIC,
    RASTER_SCALE,
)
from GW_Libs.pillow_compat import Image

logger = logging.getLogger(__name__)


class PdfUploadError(ValueError):
    """Raised when an uploaded file is not an acceptable PDF."""


class PdfRasterizeError(RuntimeError):
    """Raised when a PDF cannot be opened for rendering."""


def validate_pdf_upload(
    data: bytes,
    filename: str,
    content_type: Optional[str] = None,
    max_size: int = MAX_UPLOAD_SIZE,
) -> None:
    """
    Validate an uploaded PDF before it is rasterized.

    Args:
        data: Raw file contents
        filename: Name the file was uploaded with
        content_type: Declared MIME type, if the uploader sent one
        max_size: Maximum accepted size in bytes (default: 10 MB)

    Raises:
        PdfUploadError: If the file is empty, too large, or not a PDF
    """
    if not data:
        raise PdfUploadError("No PDF file provided")

    if content_type is not None and content_type != PDF_CONTENT_TYPE:
        raise PdfUploadError(f"Invalid file type: {content_type}. Only PDFs are allowed.")

    if Path(filename).suffix.lower() != PDF_EXTENSION:
        raise PdfUploadError(f"Invalid file extension: {filename}. Only PDFs are allowed.")

    if len(data) > max_size:
        raise PdfUploadError(
            f"File size {len(data)} bytes exceeds {max_size // (1024 * 1024)}MB limit"
        )

    if not data.startswith(PDF_MAGIC):
        raise PdfUploadError(f"File is not a PDF document: {filename}")


def _pixmap_to_buffer(pixmap: "fitz.Pixmap") -> RasterBuffer:
    image = Image.frombytes("RGB", (pixmap.width, pixmap.height), pixmap.samples)
    return RasterBuffer.from_image(image)


def rasterize_pdf(pdf_bytes: bytes, scale: float = RASTER_SCALE) -> List[RasterBuffer]:
    """
    Render every page of a PDF.

    Pages that fail to render are logged and skipped.

    Args:
        pdf_bytes: PDF document contents
        scale: Zoom factor applied to the page's 72 dpi size (default: 2.0)

    Returns:
        One RGBA RasterBuffer per successfully rendered page

    Raises:
        ValueError: If scale <= 0
        PdfRasterizeError: If the document cannot be opened
    """
    if scale <= 0:
        raise ValueError(f"scale must be > 0, got {scale}")

    try:
        document = fitz.open(stream=pdf_bytes, filetype="pdf")
    except RuntimeError as e:
        raise PdfRasterizeError(f"Could not open PDF: {e}") from e

    buffers: List[RasterBuffer] = []
    matrix = fitz.Matrix(scale, scale)
    with document:
        for page_number in range(document.page_count):
            try:
                page = document.load_page(page_number)
                pixmap = page.get_pixmap(matrix=matrix, alpha=False)
            except RuntimeError as e:
                logger.warning(f"Skipping page {page_number + 1}: render failed: {e}")
                continue
            buffers.append(_pixmap_to_buffer(pixmap))

        logger.info(f"Rasterized {len(buffers)}/{document.page_count} pages at scale {scale}")

    return buffers
