"""
Constants and configuration values for Ghost Write.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the editing engine.
"""

# Tool names
TOOL_AREA_MAGIC_BRUSH = "area-magic-brush"
TOOL_MAGIC_BRUSH = "magic-brush"
TOOL_ERASER = "eraser"
TOOL_PEN = "pen"
TOOLS = (TOOL_AREA_MAGIC_BRUSH, TOOL_MAGIC_BRUSH, TOOL_ERASER, TOOL_PEN)

# Brush defaults
DEFAULT_BRUSH_SIZE = 20
DEFAULT_PEN_COLOR = (0, 0, 0, 255)

# Magic brush sampling
MAGIC_BRUSH_SAMPLE_COUNT = 25
MAGIC_BRUSH_KEPT_SAMPLES = 10
MAGIC_BRUSH_SEARCH_FACTOR = 2
MAGIC_BRUSH_ANGLE_JITTER = 0.2
MAGIC_BRUSH_MIN_DISTANCE = 0.2

# Area fill
PROCESSING_CHUNK_SIZE = 100
MIN_SELECTION_SIZE = 5
MIN_GRID_SIZE = 5
GRID_SIZE_DIVISOR = 3

# Bilateral smoothing
SMOOTHING_KERNEL_SIZE = 5
SMOOTHING_PADDING = 10
COLOR_SIGMA = 150.0

# Input rate limits (seconds)
BRUSH_THROTTLE_INTERVAL = 0.016
AREA_FILL_THROTTLE_INTERVAL = 0.3

# PDF collaborators
RASTER_SCALE = 2.0
MAX_UPLOAD_SIZE = 10 * 1024 * 1024
PDF_MAGIC = b"%PDF"
PDF_CONTENT_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"
EXPORT_JPEG_QUALITY = 95
DEFAULT_EXPORT_FILENAME = "annotated-document.pdf"

# Document workflow steps
STEP_UPLOAD = "upload"
STEP_ANNOTATE = "annotate"
STEP_EXPORT = "export"
