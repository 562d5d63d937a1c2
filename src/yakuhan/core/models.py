# SPDX-License-Identifier: Apache-2.0
"""Data models for layout results and text styling."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TextStyle(str, Enum):
    """Font style applied when resolving a font file."""

    NORMAL = "normal"
    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold_italic"

    @property
    def is_bold(self) -> bool:
        return self in (TextStyle.BOLD, TextStyle.BOLD_ITALIC)

    @property
    def is_italic(self) -> bool:
        return self in (TextStyle.ITALIC, TextStyle.BOLD_ITALIC)


@dataclass
class Color:
    """RGB color value.

    Attributes:
        r: Red component (0-255)
        g: Green component (0-255)
        b: Blue component (0-255)
    """

    r: int = 0
    g: int = 0
    b: int = 0

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Parse a ``#RRGGBB`` or ``#RGB`` color string.

        Args:
            value: Hex color, leading ``#`` optional.

        Returns:
            Parsed Color.

        Raises:
            ValueError: If the string is not a valid hex color.
        """
        digits = value.strip().lstrip("#")
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        if len(digits) != 6:
            raise ValueError(f"Invalid hex color: {value!r}")
        try:
            r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
        except ValueError as e:
            raise ValueError(f"Invalid hex color: {value!r}") from e
        return cls(r=r, g=g, b=b)

    def to_hex(self) -> str:
        """Format as ``#RRGGBB``."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def to_rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"r": self.r, "g": self.g, "b": self.b}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Color:
        """Create from dictionary."""
        return cls(
            r=int(data.get("r", 0)),
            g=int(data.get("g", 0)),
            b=int(data.get("b", 0)),
        )


@dataclass(frozen=True)
class GlyphPlacement:
    """A single glyph positioned at its baseline.

    Attributes:
        x: Left edge of the glyph, after kerning.
        y: Baseline, measured downwards from the top of the text box.
        glyph: One code point.
        line: 1-based line number.
    """

    x: float
    y: float
    glyph: str
    line: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"x": self.x, "y": self.y, "glyph": self.glyph, "line": self.line}


@dataclass(frozen=True)
class LayoutMetrics:
    """Result of a measurement pass."""

    line_count: int
    height: int


@dataclass
class LayoutResult:
    """Result of a render pass.

    Attributes:
        placements: Glyphs in drawing order.
        line_count: Number of lines composed (after truncation).
        height: Total text height in pixels.
        advance: Right-most cursor position reached on any line.
    """

    placements: list[GlyphPlacement] = field(default_factory=list)
    line_count: int = 0
    height: int = 0
    advance: float = 0.0

    @property
    def text(self) -> str:
        """Concatenated glyphs that were placed (dropped tokens excluded)."""
        return "".join(p.glyph for p in self.placements)

    def lines(self) -> list[list[GlyphPlacement]]:
        """Group placements by line number.

        Returns:
            One list per composed line; a line left empty by a wrap is an
            empty list.
        """
        grouped: list[list[GlyphPlacement]] = [[] for _ in range(self.line_count)]
        for placement in self.placements:
            grouped[placement.line - 1].append(placement)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "line_count": self.line_count,
            "height": self.height,
            "advance": self.advance,
            "placements": [p.to_dict() for p in self.placements],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON.

        Args:
            indent: JSON indentation level

        Returns:
            JSON string representation
        """
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)
