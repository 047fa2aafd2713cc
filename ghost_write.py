"""
Ghost Write command line entry point.

Rasterizes a PDF, applies magic brush area fills and eraser strokes to one
page, and writes the re-assembled PDF.

Example:
    python ghost_write.py scan.pdf cleaned.pdf --page 1 --fill 120,80,400,140 --brush-size 24
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from GW_Libs.BrushLib.area_fill import AreaFillError
from GW_Libs.BrushLib.raster_models import Point, SelectionRect
from GW_Libs.PdfLib.pdf_rasterizer import PdfRasterizeError, PdfUploadError
from GW_Libs.SessionLib.document_session import DocumentSession
from GW_Libs.constants import DEFAULT_BRUSH_SIZE, DEFAULT_EXPORT_FILENAME, RASTER_SCALE

logger = logging.getLogger("ghost_write")


def _parse_numbers(value: str, count: int) -> List[float]:
    parts = value.split(",")
    if len(parts) != count:
        raise argparse.ArgumentTypeError(f"expected {count} comma-separated numbers, got '{value}'")
    try:
        return [float(part) for part in parts]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number in '{value}'")


def parse_rect(value: str) -> SelectionRect:
    return SelectionRect(*_parse_numbers(value, 4))


def parse_point(value: str) -> Point:
    return Point(*_parse_numbers(value, 2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghost_write",
        description="Remove content from PDF pages with a content-aware magic brush.",
    )
    parser.add_argument("input", type=Path, help="PDF to edit")
    parser.add_argument(
        "output", type=Path, nargs="?", default=Path(DEFAULT_EXPORT_FILENAME),
        help=f"Where to write the edited PDF (default: {DEFAULT_EXPORT_FILENAME})",
    )
    parser.add_argument("--page", type=int, default=1, help="1-based page to edit (default: 1)")
    parser.add_argument(
        "--fill", type=parse_rect, action="append", default=[], metavar="X1,Y1,X2,Y2",
        help="Rectangle to fill with the magic brush, in rendered pixels (repeatable)",
    )
    parser.add_argument(
        "--erase", type=parse_point, action="append", default=[], metavar="X,Y",
        help="Restore original pixels around a point (repeatable)",
    )
    parser.add_argument("--brush-size", type=int, default=DEFAULT_BRUSH_SIZE)
    parser.add_argument("--scale", type=float, default=RASTER_SCALE, help="Rasterization zoom")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible fills")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    rng = random.Random(args.seed) if args.seed is not None else None
    session = DocumentSession(scale=args.scale, rng=rng)

    try:
        session.load_pdf(args.input.read_bytes(), filename=args.input.name)
        if not 1 <= args.page <= session.page_count:
            logger.error(f"Page {args.page} out of range (document has {session.page_count} pages)")
            return 2

        session.navigate(args.page - 1)
        page = session.current_page
        page.state.set_brush_size(args.brush_size)
        for rect in args.fill:
            page.run_area_fill(rect)
        for point in args.erase:
            page.erase(point)

        args.output.write_bytes(session.export_pdf())
    except (OSError, PdfUploadError, PdfRasterizeError, AreaFillError, ValueError) as e:
        logger.error(str(e))
        return 1

    logger.info(f"Wrote {args.output} ({len(page.state.annotated_areas)} edits on page {args.page})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
