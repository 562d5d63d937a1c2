# SPDX-License-Identifier: Apache-2.0
"""Glyph classes used by the tokenizer and the kerning pass.

Full-width Japanese brackets and punctuation occupy a whole em cell with
built-in whitespace on one side. Opening brackets carry the space on their
left, closing brackets and punctuation carry it on their right.
"""

from __future__ import annotations

# Brackets whose blank half sits on the left of the glyph cell
OPENING_GLYPHS: frozenset[str] = frozenset({"（", "「", "『", "【"})

# Brackets and punctuation whose blank half sits on the right
CLOSING_GLYPHS: frozenset[str] = frozenset({"）", "」", "』", "】", "、", "。"})

KERNING_GLYPHS: frozenset[str] = OPENING_GLYPHS | CLOSING_GLYPHS

REPLACEMENT_CHAR = "\ufffd"


def is_word_char(char: str) -> bool:
    """Check if a code point belongs to an ASCII word (letters and underscore).

    Args:
        char: Single code point.

    Returns:
        True for ``a``-``z``, ``A``-``Z`` and ``_``.
    """
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def is_kerning_glyph(char: str) -> bool:
    """Check if a code point is an opening or closing kerning glyph."""
    return char in KERNING_GLYPHS


def is_cjk_char(char: str) -> bool:
    """Check if a code point is CJK (Chinese, Japanese, Korean).

    Args:
        char: Single code point.

    Returns:
        True for kana, ideographs, Hangul, CJK punctuation and full-width forms.
    """
    code = ord(char)
    return (
        0x4E00 <= code <= 0x9FFF  # CJK Unified Ideographs
        or 0x3040 <= code <= 0x309F  # Hiragana
        or 0x30A0 <= code <= 0x30FF  # Katakana
        or 0x3400 <= code <= 0x4DBF  # CJK Extension A
        or 0xAC00 <= code <= 0xD7AF  # Hangul Syllables
        or 0x3000 <= code <= 0x303F  # CJK Punctuation
        or 0xFF00 <= code <= 0xFFEF  # Fullwidth Forms
    )


def _has_surrogates(text: str) -> bool:
    return any("\ud800" <= char <= "\udfff" for char in text)


def to_code_points(text: str | bytes) -> str:
    """Normalize input into a string of whole code points.

    Bytes are decoded as UTF-8. Surrogate code units that form a valid
    high/low pair are joined into a single astral code point, and any
    unpaired surrogate is replaced with U+FFFD.

    Args:
        text: Text as ``str`` or UTF-8 ``bytes``.

    Returns:
        String in which every element is one complete code point.

    Example:
        >>> to_code_points("\\ud83d\\ude00")
        '😀'
        >>> to_code_points("a\\ud800b")
        'a\\ufffdb'
    """
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode("utf-8", errors="replace")

    if not _has_surrogates(text):
        return text

    # Round-trip through UTF-16 so adjacent pairs merge; lone halves fail
    # to decode and are replaced.
    encoded = text.encode("utf-16-le", errors="surrogatepass")
    return encoded.decode("utf-16-le", errors="replace")
