"""
Re-assemble edited page buffers into a multi-page PDF.

Each buffer is encoded as a JPEG with Pillow and placed on its own page
with PyMuPDF.
"""

import io
import logging
from typing import Optional, Sequence, Tuple

import fitz  # PyMuPDF

from GW_Libs.BrushLib.raster_models import RasterBuffer
from GW_Libs.constants import EXPORT_JPEG_QUALITY

logger = logging.getLogger(__name__)


def encode_jpeg(buffer: RasterBuffer, quality: int = EXPORT_JPEG_QUALITY) -> bytes:
    """Encode a buffer as JPEG bytes (alpha is dropped)."""
    output = io.BytesIO()
    buffer.to_image().convert("RGB").save(output, format="JPEG", quality=max(1, min(100, quality)))
    return output.getvalue()


def fit_rect(
    image_size: Tuple[int, int],
    page_size: Tuple[float, float],
) -> "fitz.Rect":
    """
    Largest rectangle with the image's aspect ratio that fits the page, centered.
    """
    image_width, image_height = image_size
    page_width, page_height = page_size
    ratio = min(page_width / image_width, page_height / image_height)
    width = image_width * ratio
    height = image_height * ratio
    left = (page_width - width) / 2
    top = (page_height - height) / 2
    return fitz.Rect(left, top, left + width, top + height)


def assemble_pdf(
    buffers: Sequence[RasterBuffer],
    page_size: Optional[Tuple[float, float]] = None,
    jpeg_quality: int = EXPORT_JPEG_QUALITY,
) -> bytes:
    """
    Build a PDF with one page per buffer.

    Args:
        buffers: Page images in order
        page_size: (width, height) in points for every page; when None each
                   page takes the size of its image
        jpeg_quality: JPEG quality 1-100 for the embedded images

    Returns:
        The PDF document as bytes

    Raises:
        ValueError: If no buffers are given or page_size is not positive
    """
    if not buffers:
        raise ValueError("No page images provided")
    if page_size is not None and (page_size[0] <= 0 or page_size[1] <= 0):
        raise ValueError(f"page_size must be positive, got {page_size}")

    document = fitz.open()
    try:
        for buffer in buffers:
            if page_size is None:
                width, height = buffer.width, buffer.height
                target = fitz.Rect(0, 0, width, height)
            else:
                width, height = page_size
                target = fit_rect(buffer.size, page_size)

            page = document.new_page(width=width, height=height)
            page.insert_image(target, stream=encode_jpeg(buffer, jpeg_quality))

        pdf_bytes = document.tobytes()
    finally:
        document.close()

    logger.info(f"Assembled PDF with {len(buffers)} pages ({len(pdf_bytes)} bytes)")
    return pdf_bytes
