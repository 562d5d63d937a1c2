# SPDX-License-Identifier: Apache-2.0
"""Line composer with yakuhan kerning.

This module provides the layout pass shared by measuring and drawing:
- Greedy token wrapping against a maximum width
- Silent truncation once the maximum line count is reached
- Half-glyph negative kerning around full-width brackets and punctuation

Measuring and drawing run the exact same traversal, so the line count of a
measurement always matches the number of lines that get drawn.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from typing import Optional, Protocol

from .glyphs import CLOSING_GLYPHS, OPENING_GLYPHS
from .metrics import FontMetrics
from .models import GlyphPlacement, LayoutMetrics, LayoutResult

logger = logging.getLogger(__name__)

WidthFunc = Callable[[str], float]
EmitFunc = Callable[[float, float, str], None]


class GlyphSink(Protocol):
    """Receiver of positioned glyphs during a render pass."""

    def draw_glyph(self, x: float, y: float, glyph: str) -> None: ...


def line_spacing(line_height: int) -> int:
    """Extra pixels inserted between two consecutive lines."""
    return math.floor(line_height / 10)


def text_height(line_count: int, line_height: int) -> int:
    """Calculate the total height occupied by composed lines.

    Args:
        line_count: Number of composed lines.
        line_height: Height of a single line in pixels.

    Returns:
        ``line_count * line_height`` plus one spacing per gap between lines,
        or 0 when there are no lines.
    """
    if line_count <= 0:
        return 0
    return int(line_count * line_height + (line_count - 1) * line_spacing(line_height))


def _compose(
    tokens: Sequence[str],
    max_width: float,
    max_lines: Optional[int],
    width_of: WidthFunc,
    line_height: int,
    font_size: float,
    kerning_only_first_char: bool,
    on_glyph: Optional[Callable[[GlyphPlacement], None]],
) -> int:
    line_limit = math.inf if max_lines is None else max_lines
    line_count = 1
    x = 0.0
    y = float(font_size)
    spacing = line_spacing(line_height)

    for i, token in enumerate(tokens):
        token_width = width_of(token)

        if x + token_width > max_width:
            if line_count + 1 > line_limit:
                logger.debug(
                    "Truncated at %d line(s); dropped %d of %d token(s)",
                    line_count,
                    len(tokens) - i,
                    len(tokens),
                )
                return line_count
            line_count += 1
            x = 0.0
            y += line_height + spacing

        for j, glyph in enumerate(token):
            glyph_width = width_of(glyph)
            is_opening = glyph in OPENING_GLYPHS
            is_closing = glyph in CLOSING_GLYPHS
            kerning = glyph_width / 2 if (is_opening or is_closing) else 0.0
            apply_kerning = not kerning_only_first_char or (i == 0 and j == 0)

            if apply_kerning and is_opening:
                x -= kerning

            if on_glyph is not None:
                on_glyph(GlyphPlacement(x=x, y=y, glyph=glyph, line=line_count))

            if apply_kerning and is_closing:
                x -= kerning

            x += glyph_width

    return line_count


def compose(
    tokens: Sequence[str],
    max_width: float,
    max_lines: Optional[int],
    width_of: WidthFunc,
    line_height: int,
    font_size: float,
    kerning_only_first_char: bool = False,
    emit: Optional[EmitFunc] = None,
) -> int:
    """Walk tokens, wrap lines and apply kerning.

    A token that would overflow the current line moves to a new line as a
    whole; tokens are never split, so a token wider than ``max_width``
    overflows horizontally. Once a wrap would exceed ``max_lines`` the pass
    stops and the remaining tokens are dropped.

    Opening brackets are pulled left by half their width before drawing.
    After a closing bracket or punctuation the cursor is pulled back by half
    its width so the next glyph tucks in. With ``kerning_only_first_char``
    the adjustment only happens for the first character of the first token.

    Args:
        tokens: Tokens from :func:`yakuhan.core.tokenizer.tokenize`.
        max_width: Available width in pixels.
        max_lines: Maximum number of lines, or None for no limit.
        width_of: Advance width oracle for a string.
        line_height: Height of one line in pixels.
        font_size: Font size in pixels; the first baseline sits here.
        kerning_only_first_char: Restrict kerning to the very first character.
        emit: Optional callback receiving ``(x, y, glyph)`` for every glyph.

    Returns:
        Number of lines composed.
    """
    on_glyph: Optional[Callable[[GlyphPlacement], None]] = None
    if emit is not None:
        on_glyph = lambda p: emit(p.x, p.y, p.glyph)  # noqa: E731

    return _compose(
        tokens,
        max_width,
        max_lines,
        width_of,
        line_height,
        font_size,
        kerning_only_first_char,
        on_glyph,
    )


class LineComposer:
    """Compose tokens into lines using injected font metrics.

    The composer holds no layout state between calls; every call to
    :meth:`measure` or :meth:`render` is an independent pass.
    """

    def __init__(
        self,
        metrics: FontMetrics,
        kerning_only_first_char: bool = False,
        max_lines: Optional[int] = None,
    ) -> None:
        """Initialize LineComposer.

        Args:
            metrics: Width and line height oracle.
            kerning_only_first_char: Restrict kerning to the first character.
            max_lines: Maximum number of lines, or None for no limit.

        Raises:
            ValueError: If max_lines is less than 1.
        """
        if max_lines is not None and max_lines < 1:
            raise ValueError(f"max_lines must be >= 1, got {max_lines}")
        self._metrics = metrics
        self._kerning_only_first_char = kerning_only_first_char
        self._max_lines = max_lines

    @property
    def metrics(self) -> FontMetrics:
        return self._metrics

    @property
    def max_lines(self) -> Optional[int]:
        return self._max_lines

    @property
    def kerning_only_first_char(self) -> bool:
        return self._kerning_only_first_char

    def _run(
        self,
        tokens: Sequence[str],
        max_width: float,
        on_glyph: Optional[Callable[[GlyphPlacement], None]],
    ) -> tuple[int, int]:
        if max_width < 0:
            raise ValueError(f"max_width must be >= 0, got {max_width}")
        if not tokens:
            return 0, 0

        line_height = self._metrics.line_height()
        line_count = _compose(
            tokens,
            max_width,
            self._max_lines,
            self._metrics.width_of,
            line_height,
            self._metrics.font_size,
            self._kerning_only_first_char,
            on_glyph,
        )
        return line_count, text_height(line_count, line_height)

    def measure(self, tokens: Sequence[str], max_width: float) -> LayoutMetrics:
        """Measure the number of lines and the height of the text.

        Args:
            tokens: Tokens to compose.
            max_width: Available width in pixels.

        Returns:
            LayoutMetrics; zero lines and zero height for no tokens.
        """
        line_count, height = self._run(tokens, max_width, None)
        return LayoutMetrics(line_count=line_count, height=height)

    def render(
        self,
        tokens: Sequence[str],
        max_width: float,
        sink: Optional[GlyphSink] = None,
    ) -> LayoutResult:
        """Compose tokens and collect a placement for every drawn glyph.

        Args:
            tokens: Tokens to compose.
            max_width: Available width in pixels.
            sink: Optional receiver called for each glyph in drawing order.

        Returns:
            LayoutResult with placements, line count and height.
        """
        placements: list[GlyphPlacement] = []

        def collect(placement: GlyphPlacement) -> None:
            placements.append(placement)
            if sink is not None:
                sink.draw_glyph(placement.x, placement.y, placement.glyph)

        line_count, height = self._run(tokens, max_width, collect)

        advance = 0.0
        for placement in placements:
            advance = max(advance, placement.x + self._metrics.width_of(placement.glyph))

        return LayoutResult(
            placements=placements,
            line_count=line_count,
            height=height,
            advance=advance,
        )
