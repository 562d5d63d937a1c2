# SPDX-License-Identifier: Apache-2.0
"""Tests for data models."""

from __future__ import annotations

import json

import pytest

from yakuhan.core.models import Color, GlyphPlacement, LayoutResult, TextStyle


class TestColor:
    def test_from_hex_long(self) -> None:
        assert Color.from_hex("#12ab34") == Color(0x12, 0xAB, 0x34)

    def test_from_hex_short(self) -> None:
        assert Color.from_hex("#FFF") == Color(255, 255, 255)

    def test_from_hex_without_hash(self) -> None:
        assert Color.from_hex("000000") == Color(0, 0, 0)

    @pytest.mark.parametrize("value", ["", "#12", "#GGGGGG", "#1234567"])
    def test_invalid_hex(self, value: str) -> None:
        with pytest.raises(ValueError):
            Color.from_hex(value)

    def test_to_hex(self) -> None:
        assert Color(255, 0, 16).to_hex() == "#FF0010"

    def test_dict_conversion(self) -> None:
        color = Color(1, 2, 3)
        assert Color.from_dict(color.to_dict()) == color


class TestTextStyle:
    def test_flags(self) -> None:
        assert TextStyle.BOLD_ITALIC.is_bold
        assert TextStyle.BOLD_ITALIC.is_italic
        assert not TextStyle.NORMAL.is_bold
        assert TextStyle("italic") is TextStyle.ITALIC


class TestLayoutResult:
    @pytest.fixture
    def result(self) -> LayoutResult:
        return LayoutResult(
            placements=[
                GlyphPlacement(x=-5.0, y=10.0, glyph="「", line=1),
                GlyphPlacement(x=5.0, y=10.0, glyph="あ", line=1),
                GlyphPlacement(x=0.0, y=23.0, glyph="」", line=2),
            ],
            line_count=2,
            height=25,
            advance=15.0,
        )

    def test_text(self, result: LayoutResult) -> None:
        assert result.text == "「あ」"

    def test_lines(self, result: LayoutResult) -> None:
        lines = result.lines()
        assert len(lines) == 2
        assert [p.glyph for p in lines[0]] == ["「", "あ"]
        assert [p.glyph for p in lines[1]] == ["」"]

    def test_to_json(self, result: LayoutResult) -> None:
        raw = result.to_json()
        assert "「" in raw
        data = json.loads(raw)
        assert data["line_count"] == 2
        assert data["placements"][0] == {"x": -5.0, "y": 10.0, "glyph": "「", "line": 1}
