# SPDX-License-Identifier: Apache-2.0
"""Tests for the command line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from yakuhan.cli import build_config, parse_args, resolve_backend, run
from yakuhan.core.models import TextStyle


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("YAKUHAN_BACKEND", raising=False)
    monkeypatch.delenv("YAKUHAN_FONT_PATH", raising=False)


class TestParseArgs:
    """Tests for parse_args function."""

    def test_defaults(self) -> None:
        args = parse_args(["「あ」"])
        assert args.text == "「あ」"
        assert args.width == 320.0
        assert args.max_lines is None
        assert args.kerning_first_only is False
        assert args.style == "normal"
        assert args.backend is None

    def test_layout_options(self) -> None:
        args = parse_args(
            ["x", "-w", "100", "--max-lines", "2", "--kerning-first-only", "--style", "bold"]
        )
        assert args.width == 100.0
        assert args.max_lines == 2
        assert args.kerning_first_only is True
        assert build_config(args).text_style is TextStyle.BOLD

    def test_invalid_style(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["x", "--style", "heavy"])


class TestResolveBackend:
    def test_default_backend(self) -> None:
        assert resolve_backend(parse_args(["x"])) == "pillow"

    def test_env_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("YAKUHAN_BACKEND", "pdfium")
        assert resolve_backend(parse_args(["x"])) == "pdfium"

    def test_pdf_output_selects_pdfium(self) -> None:
        assert resolve_backend(parse_args(["x", "-o", "out.pdf"])) == "pdfium"

    def test_conflicting_backend(self) -> None:
        with pytest.raises(ValueError):
            resolve_backend(parse_args(["x", "-o", "out.pdf", "-b", "pillow"]))

    def test_unsupported_suffix(self) -> None:
        with pytest.raises(ValueError):
            resolve_backend(parse_args(["x", "-o", "out.txt"]))

    def test_env_font_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("YAKUHAN_FONT_PATH", "/fonts/Noto.ttf")
        assert build_config(parse_args(["x"])).font_path == Path("/fonts/Noto.ttf")


class TestRun:
    """Tests for run."""

    def test_tokens(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(parse_args(["「こんにちは。」", "--tokens"])) == 0
        out = capsys.readouterr().out
        assert json.loads(out) == ["「", "こ", "ん", "に", "ち", "は。」"]

    def test_measure(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(parse_args(["Hello"])) == 0
        out = capsys.readouterr().out
        assert "Lines: 1" in out
        assert "Height:" in out

    def test_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(parse_args(["Hi", "--json"])) == 0
        data = json.loads(capsys.readouterr().out)
        assert [p["glyph"] for p in data["placements"]] == ["H", "i"]

    def test_text_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        text_file = tmp_path / "note.txt"
        text_file.write_text("「あ」\n", encoding="utf-8")
        assert run(parse_args(["-f", str(text_file), "--tokens"])) == 0
        assert json.loads(capsys.readouterr().out) == ["「", "あ」"]

    def test_png_output(self, tmp_path: Path) -> None:
        output = tmp_path / "out.png"
        assert run(parse_args(["Hello", "-o", str(output)])) == 0
        assert output.read_bytes().startswith(b"\x89PNG")

    def test_pdf_output(self, tmp_path: Path) -> None:
        output = tmp_path / "out.pdf"
        assert run(parse_args(["Hello", "-o", str(output)])) == 0
        assert output.read_bytes().startswith(b"%PDF")

    def test_missing_text(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(parse_args([])) == 1
        assert "No text given" in capsys.readouterr().err

    def test_text_and_file(self, tmp_path: Path) -> None:
        assert run(parse_args(["x", "-f", str(tmp_path / "a.txt")])) == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        assert run(parse_args(["-f", str(tmp_path / "missing.txt")])) == 1

    def test_invalid_color(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(parse_args(["x", "--color", "red"])) == 1
        assert "Invalid hex color" in capsys.readouterr().err

    def test_negative_width(self) -> None:
        assert run(parse_args(["x", "-w", "-5"])) == 1

    def test_missing_font(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(parse_args(["x", "--font", str(tmp_path / "missing.ttf")])) == 1
        assert "Font file not found" in capsys.readouterr().err
