"""
GW_Libs - Ghost Write Library Modules

This package contains core functionality for the Ghost Write PDF page
editor, organized into specialized sub-packages:

- BrushLib: Raster model, brush tools, smoothing and area fill
- SessionLib: Tool state and page/document editing sessions
- PdfLib: PDF rasterization and re-assembly
"""

__version__ = "0.1.0"
