# SPDX-License-Identifier: Apache-2.0
"""Font metrics backends used as width and line-height oracles.

The composer only needs two questions answered: how wide is a string, and
how tall is a line. This module provides:
- FixedWidthMetrics: deterministic oracle with a constant advance
- PdfiumFontMetrics: PDFium font metrics (standard PDF fonts or TTF/OTF)
- PillowFontMetrics: Pillow FreeType metrics, matching Pillow rendering
"""

from __future__ import annotations

import ctypes
import logging
import math
from pathlib import Path
from typing import Any, Optional, Protocol, Union, runtime_checkable

import pypdfium2 as pdfium  # type: ignore[import-untyped]
from PIL import ImageFont

from yakuhan.errors import FontLoadError

from .glyphs import is_cjk_char
from .helpers import to_byte_array
from .models import TextStyle

logger = logging.getLogger(__name__)

# Glyph laid out to obtain the height of a single line
REFERENCE_GLYPH = "A"

DEFAULT_STANDARD_FONT = "Helvetica"

NO_CJK_HINT = "set --font or YAKUHAN_FONT_PATH to a font with Japanese glyphs"

# Base-14 font names per style
_STANDARD_FONT_VARIANTS: dict[str, dict[TextStyle, str]] = {
    "Helvetica": {
        TextStyle.NORMAL: "Helvetica",
        TextStyle.BOLD: "Helvetica-Bold",
        TextStyle.ITALIC: "Helvetica-Oblique",
        TextStyle.BOLD_ITALIC: "Helvetica-BoldOblique",
    },
    "Times-Roman": {
        TextStyle.NORMAL: "Times-Roman",
        TextStyle.BOLD: "Times-Bold",
        TextStyle.ITALIC: "Times-Italic",
        TextStyle.BOLD_ITALIC: "Times-BoldItalic",
    },
    "Courier": {
        TextStyle.NORMAL: "Courier",
        TextStyle.BOLD: "Courier-Bold",
        TextStyle.ITALIC: "Courier-Oblique",
        TextStyle.BOLD_ITALIC: "Courier-BoldOblique",
    },
}


@runtime_checkable
class FontMetrics(Protocol):
    """Width and line height oracle for one font at one size."""

    font_size: float

    def width_of(self, text: str) -> float: ...

    def line_height(self) -> int: ...


def _spaced_line_height(
    base_height: float, spacing_multiplier: float, spacing_addition: float
) -> int:
    return int(math.ceil(base_height * spacing_multiplier + spacing_addition))


def find_font_variant(base_font_path: Path, style: TextStyle) -> Path:
    """Find the font file for a style using common naming conventions.

    Args:
        base_font_path: Path to the regular font file.
        style: Requested style.

    Returns:
        Path to the variant, or the base path if no variant file exists.
    """
    if style is TextStyle.NORMAL:
        return base_font_path

    base_name = base_font_path.stem
    for suffix in ("-Regular", "-Normal", "-Book", "Regular"):
        if base_name.endswith(suffix):
            base_name = base_name[: -len(suffix)]
            break

    if style.is_bold and style.is_italic:
        candidates = ["-BoldItalic", "-Bold Italic", "BoldItalic", "-BoldOblique"]
    elif style.is_bold:
        candidates = ["-Bold", "Bold", "-SemiBold", "-Medium"]
    else:
        candidates = ["-Italic", "Italic", "-Oblique"]

    for suffix in candidates:
        variant = base_font_path.with_name(f"{base_name}{suffix}{base_font_path.suffix}")
        if variant.exists():
            return variant

    logger.warning("No %s variant found for %s", style.value, base_font_path.name)
    return base_font_path


class FixedWidthMetrics:
    """Metrics where every code point has the same advance width."""

    def __init__(
        self,
        glyph_width: float = 10.0,
        line_height: int = 12,
        font_size: float = 10.0,
    ) -> None:
        self.glyph_width = glyph_width
        self.font_size = font_size
        self._line_height = line_height

    def width_of(self, text: str) -> float:
        return len(text) * self.glyph_width

    def line_height(self) -> int:
        return self._line_height


class PdfiumFontMetrics:
    """Font metrics read from a PDFium font handle.

    The font is loaded into a private in-memory document; call :meth:`close`
    (or use the instance as a context manager) to release it.

    Example:
        >>> with PdfiumFontMetrics(font_size=16.0) as metrics:
        ...     metrics.width_of("Hello")
    """

    def __init__(
        self,
        font_size: float,
        font_path: Optional[Union[Path, str]] = None,
        standard_font: str = DEFAULT_STANDARD_FONT,
        style: TextStyle = TextStyle.NORMAL,
        spacing_multiplier: float = 1.0,
        spacing_addition: float = 0.0,
    ) -> None:
        """Initialize PdfiumFontMetrics.

        Args:
            font_size: Font size in pixels (1 px = 1 pt).
            font_path: TrueType/OpenType file. If None, a standard font is used.
            standard_font: Base-14 font family used when font_path is None.
            style: Font style.
            spacing_multiplier: Line height multiplier.
            spacing_addition: Extra pixels added to the line height.

        Raises:
            FontLoadError: If the font cannot be loaded.
        """
        self.font_size = float(font_size)
        self._spacing_multiplier = spacing_multiplier
        self._spacing_addition = spacing_addition
        self._font_buffer: Optional[ctypes.Array[Any]] = None
        self._widths: dict[str, float] = {}
        self._pdf: Optional[pdfium.PdfDocument] = pdfium.PdfDocument.new()
        self._font: Any = None
        self._is_cid = font_path is not None
        self._cjk_warned = False

        try:
            if font_path is not None:
                self._font = self._load_font_file(find_font_variant(Path(font_path), style))
            else:
                self._font = self._load_standard_font(standard_font, style)
        except FontLoadError:
            self.close()
            raise

    def __enter__(self) -> PdfiumFontMetrics:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def font_handle(self) -> Any:
        """Raw FPDF_FONT handle."""
        return self._font

    @property
    def document(self) -> pdfium.PdfDocument:
        """Document that owns the font handle."""
        if self._pdf is None:
            raise RuntimeError("Font metrics are closed")
        return self._pdf

    def close(self) -> None:
        """Release the font and its document."""
        if self._pdf is not None:
            if self._font:
                pdfium.raw.FPDFFont_Close(self._font)
                self._font = None
            self._pdf.close()
            self._pdf = None
        self._font_buffer = None
        self._widths.clear()

    def _load_font_file(self, path: Path) -> Any:
        if not path.exists():
            raise FontLoadError(f"Font file not found: {path}", stage="font")

        font_data = path.read_bytes()
        # Keep the buffer alive for the lifetime of the font handle
        self._font_buffer = to_byte_array(font_data)
        # CID mode so CJK glyphs resolve
        handle = pdfium.raw.FPDFText_LoadFont(
            self.document.raw,
            self._font_buffer,
            ctypes.c_uint(len(font_data)),
            ctypes.c_int(pdfium.raw.FPDF_FONT_TRUETYPE),
            ctypes.c_int(1),
        )
        if not handle:
            raise FontLoadError(f"PDFium rejected font: {path}", stage="font")
        logger.debug("Loaded font %s", path.name)
        return handle

    def _load_standard_font(self, family: str, style: TextStyle) -> Any:
        name = _STANDARD_FONT_VARIANTS.get(family, {}).get(style, family)
        logger.warning("Using standard font %s without CJK coverage; %s", name, NO_CJK_HINT)
        handle = pdfium.raw.FPDFText_LoadStandardFont(
            self.document.raw, name.encode("utf-8")
        )
        if not handle:
            raise FontLoadError(f"Unknown standard font: {name}", stage="font")
        return handle

    def _warn_missing_cjk(self, text: str) -> None:
        # Base-14 fonts carry no CJK glyphs; every CJK code point gets the
        # same placeholder width
        if self._is_cid or self._cjk_warned:
            return
        if any(is_cjk_char(char) for char in text):
            self._cjk_warned = True
            logger.warning(
                "Standard font has no glyph for CJK text %r; widths are placeholders, %s",
                text,
                NO_CJK_HINT,
            )

    def _glyph_width(self, char: str) -> float:
        cached = self._widths.get(char)
        if cached is not None:
            return cached

        width_out = ctypes.c_float()
        result = pdfium.raw.FPDFFont_GetGlyphWidth(
            self._font,
            ord(char),
            ctypes.c_float(self.font_size),
            ctypes.byref(width_out),
        )
        width = width_out.value if result else 0.0
        self._widths[char] = width
        return width

    def width_of(self, text: str) -> float:
        """Calculate the advance width of text.

        Args:
            text: Text to measure.

        Returns:
            Total width in pixels; glyphs missing from the font count as 0.
        """
        self._warn_missing_cjk(text)
        return sum(self._glyph_width(char) for char in text)

    def ascent(self) -> float:
        """Distance from the baseline to the top of the font box."""
        ascent = ctypes.c_float()
        pdfium.raw.FPDFFont_GetAscent(
            self._font, ctypes.c_float(self.font_size), ctypes.byref(ascent)
        )
        return ascent.value

    def descent(self) -> float:
        """Distance from the baseline to the bottom (negative)."""
        descent = ctypes.c_float()
        pdfium.raw.FPDFFont_GetDescent(
            self._font, ctypes.c_float(self.font_size), ctypes.byref(descent)
        )
        return descent.value

    def line_height(self) -> int:
        # descent is negative, so subtracting adds its absolute value
        base_height = self.ascent() - self.descent()
        return _spaced_line_height(
            base_height, self._spacing_multiplier, self._spacing_addition
        )


class PillowFontMetrics:
    """Font metrics from a Pillow FreeType font."""

    def __init__(
        self,
        font_size: float,
        font_path: Optional[Union[Path, str]] = None,
        style: TextStyle = TextStyle.NORMAL,
        spacing_multiplier: float = 1.0,
        spacing_addition: float = 0.0,
    ) -> None:
        """Initialize PillowFontMetrics.

        Args:
            font_size: Font size in pixels.
            font_path: TrueType/OpenType file. If None, Pillow's default font.
            style: Font style, resolved to a sibling font file.
            spacing_multiplier: Line height multiplier.
            spacing_addition: Extra pixels added to the line height.

        Raises:
            FontLoadError: If the font cannot be loaded.
        """
        self.font_size = float(font_size)
        self._spacing_multiplier = spacing_multiplier
        self._spacing_addition = spacing_addition

        if font_path is not None:
            path = find_font_variant(Path(font_path), style)
            if not path.exists():
                raise FontLoadError(f"Font file not found: {path}", stage="font")
            try:
                self.font: Any = ImageFont.truetype(str(path), self.font_size)
            except OSError as e:
                raise FontLoadError(
                    f"Pillow could not load font: {path}", stage="font", cause=e
                ) from e
        else:
            if style is not TextStyle.NORMAL:
                logger.warning("Default font has no %s variant", style.value)
            logger.warning("Using Pillow default font without CJK coverage; %s", NO_CJK_HINT)
            self.font = ImageFont.load_default(size=self.font_size)
        self._is_default_font = font_path is None
        self._cjk_warned = False

    def width_of(self, text: str) -> float:
        if not text:
            return 0.0
        if self._is_default_font and not self._cjk_warned:
            if any(is_cjk_char(char) for char in text):
                self._cjk_warned = True
                logger.warning(
                    "Default font has no glyph for CJK text %r; widths are placeholders, %s",
                    text,
                    NO_CJK_HINT,
                )
        return float(self.font.getlength(text))

    def line_height(self) -> int:
        if isinstance(self.font, ImageFont.FreeTypeFont):
            ascent, descent = self.font.getmetrics()
            base_height: float = ascent + descent
        else:
            _, top, _, bottom = self.font.getbbox(REFERENCE_GLYPH)
            base_height = bottom - top
        return _spaced_line_height(
            base_height, self._spacing_multiplier, self._spacing_addition
        )
