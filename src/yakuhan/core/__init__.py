# SPDX-License-Identifier: Apache-2.0
"""Tokenizer, line composer and font metrics."""

from .composer import GlyphSink, LineComposer, compose, line_spacing, text_height
from .glyphs import (
    CLOSING_GLYPHS,
    KERNING_GLYPHS,
    OPENING_GLYPHS,
    is_cjk_char,
    is_kerning_glyph,
    is_word_char,
    to_code_points,
)
from .metrics import (
    FixedWidthMetrics,
    FontMetrics,
    PdfiumFontMetrics,
    PillowFontMetrics,
    find_font_variant,
)
from .models import Color, GlyphPlacement, LayoutMetrics, LayoutResult, TextStyle
from .tokenizer import tokenize

__all__ = [
    "CLOSING_GLYPHS",
    "Color",
    "FixedWidthMetrics",
    "FontMetrics",
    "GlyphPlacement",
    "GlyphSink",
    "KERNING_GLYPHS",
    "LayoutMetrics",
    "LayoutResult",
    "LineComposer",
    "OPENING_GLYPHS",
    "PdfiumFontMetrics",
    "PillowFontMetrics",
    "TextStyle",
    "compose",
    "find_font_variant",
    "is_cjk_char",
    "is_kerning_glyph",
    "is_word_char",
    "line_spacing",
    "text_height",
    "to_code_points",
    "tokenize",
]
