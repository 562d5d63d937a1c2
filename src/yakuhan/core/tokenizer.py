# SPDX-License-Identifier: Apache-2.0
"""Tokenizer producing the units used for line-wrap overflow tests.

Tokens are built so that a line break never separates:
- the letters of an ASCII word, or
- a character from the brackets/punctuation that immediately follow it.

Example:
    >>> tokenize("「こんにちは。」")
    ['「', 'こ', 'ん', 'に', 'ち', 'は。」']
"""

from __future__ import annotations

from .glyphs import is_kerning_glyph, is_word_char, to_code_points


def tokenize(text: str | bytes) -> list[str]:
    """Split text into word, punctuation-run and singleton tokens.

    Rules are applied left to right at each offset:
    1. An ASCII letter or underscore starts a word; the maximal run of such
       characters is one token.
    2. Otherwise, if the next character is a kerning glyph, the current
       character anchors a token that extends over the following run of
       kerning glyphs.
    3. Otherwise the single character is a token.

    Args:
        text: Input text. Offsets are code points, never UTF-16 units.

    Returns:
        Ordered tokens whose concatenation equals the normalized input.
    """
    chars = to_code_points(text)
    tokens: list[str] = []

    index = 0
    length = len(chars)
    while index < length:
        start = index
        if is_word_char(chars[index]):
            index += 1
            while index < length and is_word_char(chars[index]):
                index += 1
        elif index + 1 < length and is_kerning_glyph(chars[index + 1]):
            index += 1
            while index < length and is_kerning_glyph(chars[index]):
                index += 1
        else:
            index += 1
        tokens.append(chars[start:index])

    return tokens
