# SPDX-License-Identifier: Apache-2.0
"""Tests for the image and PDF renderers."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pypdfium2 as pdfium
import pytest
from PIL import Image, ImageDraw, ImageFont

from yakuhan.core.metrics import PillowFontMetrics
from yakuhan.errors import RenderError
from yakuhan.output import ImageRenderer, PdfRenderer
from yakuhan.view import TextViewConfig, YakuhanText

FPDF_PAGEOBJ_TEXT = 1


@pytest.fixture
def pillow_view() -> Iterator[YakuhanText]:
    view = YakuhanText("Hello World", TextViewConfig(text_size=16))
    yield view
    view.close()


@pytest.fixture
def pdfium_view() -> Iterator[YakuhanText]:
    view = YakuhanText("Hello World", TextViewConfig(text_size=16, backend="pdfium"))
    yield view
    view.close()


class TestImageRenderer:
    """Tests for ImageRenderer."""

    def test_image_size_matches_measurement(self, pillow_view: YakuhanText) -> None:
        image, result = ImageRenderer(pillow_view).render(200)
        assert image.size == (200, result.height)
        assert image.mode == "RGBA"

    def test_glyphs_are_drawn(self, pillow_view: YakuhanText) -> None:
        image, result = ImageRenderer(pillow_view).render(200)
        assert len(result.placements) == len("Hello World")
        assert image.getbbox() is not None

    def test_empty_text(self) -> None:
        with YakuhanText("") as view:
            image, result = ImageRenderer(view).render(50)
            assert result.line_count == 0
            assert image.size == (50, 1)
            assert image.getbbox() is None

    def test_text_color(self) -> None:
        config = TextViewConfig(text_size=32, text_color="#FF0000")
        with YakuhanText("H", config) as view:
            image, _ = ImageRenderer(view).render(40)
            pixels = image.getcolors(maxcolors=image.width * image.height)
            colors = {rgba[:3] for _, rgba in pixels if rgba[3] == 255}
            assert colors == {(255, 0, 0)}

    def test_save_png(self, pillow_view: YakuhanText, tmp_path: Path) -> None:
        output = tmp_path / "out" / "hello.png"
        ImageRenderer(pillow_view).save(200, output)
        with Image.open(output) as image:
            assert image.format == "PNG"

    def test_to_png(self, pillow_view: YakuhanText) -> None:
        assert ImageRenderer(pillow_view).to_png(200).startswith(b"\x89PNG")

    def test_requires_pillow_metrics(self, pdfium_view: YakuhanText) -> None:
        with pytest.raises(RenderError):
            ImageRenderer(pdfium_view).render(200)

    def test_draw_glyph_outside_render(self, pillow_view: YakuhanText) -> None:
        with pytest.raises(RenderError):
            ImageRenderer(pillow_view).draw_glyph(0, 0, "A")

    def test_bitmap_font_glyphs_share_baseline(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def bitmap_metrics(config: TextViewConfig) -> PillowFontMetrics:
            metrics = PillowFontMetrics(font_size=config.text_size_px)
            metrics.font = ImageFont.load_default_imagefont()
            return metrics

        origins: list[tuple[float, float]] = []

        def record_text(
            self: ImageDraw.ImageDraw, xy: tuple[float, float], text: str, **kwargs: object
        ) -> None:
            origins.append(xy)

        monkeypatch.setattr(ImageDraw.ImageDraw, "text", record_text)
        with YakuhanText("Ag.", metrics_factory=bitmap_metrics) as view:
            ImageRenderer(view).render(200)

        assert len(origins) == 3
        assert len({y for _, y in origins}) == 1


class TestPdfRenderer:
    """Tests for PdfRenderer."""

    def test_add_page(self, pdfium_view: YakuhanText) -> None:
        renderer = PdfRenderer(pdfium_view)
        result = renderer.add_page(200)
        assert renderer.page_count == 1
        assert result.line_count == 1

    def test_one_text_object_per_glyph(self, pdfium_view: YakuhanText) -> None:
        renderer = PdfRenderer(pdfium_view)
        renderer.add_page(200)
        data = renderer.to_bytes()
        assert data.startswith(b"%PDF")

        doc = pdfium.PdfDocument(data)
        try:
            page = doc[0]
            objects = list(page.get_objects(filter=[FPDF_PAGEOBJ_TEXT]))
            assert len(objects) == len("Hello World")
            assert page.get_width() == 200
        finally:
            doc.close()

    def test_multiple_pages(self, pdfium_view: YakuhanText, tmp_path: Path) -> None:
        renderer = PdfRenderer(pdfium_view)
        renderer.add_page(200)
        renderer.add_page(40)
        output = tmp_path / "hello.pdf"
        renderer.save(output)
        doc = pdfium.PdfDocument(output)
        try:
            assert len(doc) == 2
        finally:
            doc.close()

    def test_requires_pdfium_metrics(self, pillow_view: YakuhanText) -> None:
        with pytest.raises(RenderError):
            PdfRenderer(pillow_view)

    def test_add_page_after_font_change(self, pdfium_view: YakuhanText) -> None:
        renderer = PdfRenderer(pdfium_view)
        renderer.add_page(200)
        pdfium_view.configure(text_size=20)

        result = renderer.add_page(200)
        assert result.line_count == 1
        # Pages live in the document of the current metrics
        assert renderer.page_count == 1
        assert renderer.to_bytes().startswith(b"%PDF")

    def test_add_page_after_backend_change(self, pdfium_view: YakuhanText) -> None:
        renderer = PdfRenderer(pdfium_view)
        pdfium_view.configure(backend="pillow")
        with pytest.raises(RenderError):
            renderer.add_page(200)
