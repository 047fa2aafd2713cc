"""
PdfLib - PDF input and output

This module converts uploaded PDFs into page buffers and assembles edited
page buffers back into a PDF document.
"""

from GW_Libs.PdfLib.pdf_rasterizer import (
    PdfRasterizeError,
    PdfUploadError,
    rasterize_pdf,
    validate_pdf_upload,
)
from GW_Libs.PdfLib.pdf_assembler import assemble_pdf, encode_jpeg

__all__ = [
    "PdfRasterizeError",
    "PdfUploadError",
    "rasterize_pdf",
    "validate_pdf_upload",
    "assemble_pdf",
    "encode_jpeg",
]
