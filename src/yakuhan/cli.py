# SPDX-License-Identifier: Apache-2.0
"""
yakuhan - CLI Tool

Lays out Japanese text with half-width bracket kerning. Prints tokens,
measurements or glyph placements, and optionally renders PNG or PDF.

Usage:
    yakuhan <text> [options]

Examples:
    yakuhan "「こんにちは。」"                     # Lines and height
    yakuhan "「こんにちは。」" --tokens            # Token list
    yakuhan "「こんにちは。」" --json -w 120        # Glyph placements
    yakuhan -f note.txt -w 320 -o note.png
    yakuhan -f note.txt -w 320 -o note.pdf --max-lines 3
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn, Optional

from dotenv import load_dotenv

from yakuhan.core.models import TextStyle
from yakuhan.errors import YakuhanError
from yakuhan.output import ImageRenderer, PdfRenderer
from yakuhan.view import BACKENDS, TextViewConfig, YakuhanText

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 320.0

# Output suffix -> metrics backend able to render it
OUTPUT_BACKENDS = {".png": "pillow", ".pdf": "pdfium"}


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse; ``sys.argv[1:]`` when None.

    Returns:
        Parsed argument Namespace.
    """
    parser = argparse.ArgumentParser(
        prog="yakuhan",
        description="Japanese text layout with yakuhan kerning",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "「こんにちは。」"                 # Lines and height
  %(prog)s "「こんにちは。」" --tokens        # Token list
  %(prog)s -f note.txt -w 320 -o note.png   # Render PNG (Pillow)
  %(prog)s -f note.txt -w 320 -o note.pdf   # Render PDF (PDFium)

Environment Variables:
  YAKUHAN_FONT_PATH   Default font file (overridden by --font)
  YAKUHAN_BACKEND     Default metrics backend: pillow or pdfium
""",
    )

    parser.add_argument(
        "text",
        nargs="?",
        help="Text to lay out (or use --file)",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        help="Read text from a UTF-8 file",
    )

    layout_group = parser.add_argument_group("Layout options")
    layout_group.add_argument(
        "-w",
        "--width",
        type=float,
        default=DEFAULT_WIDTH,
        help=f"Available width in pixels (default: {DEFAULT_WIDTH:g})",
    )
    layout_group.add_argument(
        "--max-lines",
        type=int,
        help="Maximum number of lines (default: unlimited)",
    )
    layout_group.add_argument(
        "--kerning-first-only",
        action="store_true",
        help="Kern only the first character of the text",
    )
    layout_group.add_argument(
        "--spacing-multiplier",
        type=float,
        default=1.0,
        help="Line height multiplier (default: 1.0)",
    )
    layout_group.add_argument(
        "--spacing-addition",
        type=float,
        default=0.0,
        help="Extra pixels added to the line height (default: 0)",
    )

    font_group = parser.add_argument_group("Font options")
    font_group.add_argument(
        "--font",
        type=Path,
        help="Font file (or set YAKUHAN_FONT_PATH)",
    )
    font_group.add_argument(
        "--size",
        type=float,
        default=12.0,
        help="Text size in scale-independent units (default: 12)",
    )
    font_group.add_argument(
        "--density",
        type=float,
        default=1.0,
        help="Pixels per scale-independent unit (default: 1.0)",
    )
    font_group.add_argument(
        "--style",
        default="normal",
        choices=[s.value for s in TextStyle],
        help="Font style (default: normal)",
    )
    font_group.add_argument(
        "--color",
        default="#000000",
        help="Text color as hex (default: #000000)",
    )
    font_group.add_argument(
        "-b",
        "--backend",
        choices=list(BACKENDS),
        help="Metrics backend (default: pillow, or by output suffix)",
    )

    out_group = parser.add_argument_group("Output options")
    out_group.add_argument(
        "--tokens",
        action="store_true",
        help="Print the token list as JSON",
    )
    out_group.add_argument(
        "--json",
        action="store_true",
        help="Print glyph placements as JSON",
    )
    out_group.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Render to a .png or .pdf file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    return parser.parse_args(argv)


def read_text(args: argparse.Namespace) -> str:
    """Get the input text from the positional argument or --file.

    Raises:
        ValueError: If no text is given, or both sources are given.
        FileNotFoundError: If the text file does not exist.
    """
    if args.file and args.text is not None:
        raise ValueError("Give either TEXT or --file, not both")
    if args.file:
        if not args.file.exists():
            raise FileNotFoundError(f"File not found: {args.file}")
        return args.file.read_text(encoding="utf-8").rstrip("\n")
    if args.text is None:
        raise ValueError("No text given (pass TEXT or --file)")
    return args.text


def resolve_backend(args: argparse.Namespace) -> str:
    """Choose the metrics backend from --backend, the output suffix and env.

    Raises:
        ValueError: If the output format cannot be rendered by the backend.
    """
    required = None
    if args.output:
        suffix = args.output.suffix.lower()
        if suffix not in OUTPUT_BACKENDS:
            raise ValueError(f"Unsupported output format: {args.output.suffix or '(none)'}")
        required = OUTPUT_BACKENDS[suffix]

    backend = args.backend or required or os.environ.get("YAKUHAN_BACKEND", "pillow")
    if required and backend != required:
        raise ValueError(f"{args.output.suffix} output requires --backend {required}")
    return backend


def build_config(args: argparse.Namespace) -> TextViewConfig:
    """Create a TextViewConfig from CLI arguments and the environment."""
    font_path = args.font
    if font_path is None and os.environ.get("YAKUHAN_FONT_PATH"):
        font_path = Path(os.environ["YAKUHAN_FONT_PATH"])

    return TextViewConfig(
        text_color=args.color,
        text_size=args.size,
        scaled_density=args.density,
        font_path=font_path,
        text_style=TextStyle(args.style),
        max_lines=args.max_lines,
        kerning_only_first_char=args.kerning_first_only,
        spacing_multiplier=args.spacing_multiplier,
        spacing_addition=args.spacing_addition,
        backend=resolve_backend(args),
    )


def run(args: argparse.Namespace) -> int:
    """Execute layout and output.

    Args:
        args: Command line arguments.

    Returns:
        Exit code (0: success, 1: failure).
    """
    try:
        text = read_text(args)
        config = build_config(args)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.width < 0:
        print(f"Error: Width must be >= 0: {args.width:g}", file=sys.stderr)
        return 1

    if args.tokens:
        view = YakuhanText(text, config)
        print(json.dumps(view.tokens, ensure_ascii=False))
        return 0

    try:
        with YakuhanText(text, config) as view:
            if args.output:
                if config.backend == "pdfium":
                    pdf_renderer = PdfRenderer(view)
                    result = pdf_renderer.add_page(args.width)
                    pdf_renderer.save(args.output)
                else:
                    result = ImageRenderer(view).save(args.width, args.output)
            else:
                result = view.layout(args.width)
    except YakuhanError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose and e.cause is not None:
            logger.debug("Caused by: %r", e.cause)
        return 1

    if args.json:
        print(result.to_json())
    else:
        print(f"Lines: {result.line_count}")
        print(f"Height: {result.height}")
        if args.output:
            print(f"Output: {args.output}")
    return 0


def main() -> NoReturn:
    """Main entry point."""
    load_dotenv()
    args = parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    sys.exit(run(args))


if __name__ == "__main__":
    main()
