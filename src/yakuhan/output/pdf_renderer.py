# SPDX-License-Identifier: Apache-2.0
"""Render a text view into PDF pages using PDFium text objects."""

from __future__ import annotations

import ctypes
import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Optional

import pypdfium2 as pdfium  # type: ignore[import-untyped]

from yakuhan.core.helpers import to_widestring
from yakuhan.core.metrics import PdfiumFontMetrics
from yakuhan.core.models import Color, LayoutResult
from yakuhan.errors import RenderError
from yakuhan.view import YakuhanText

logger = logging.getLogger(__name__)


class PdfRenderer:
    """Write each glyph of a YakuhanText as a PDF text object.

    Every call to :meth:`add_page` appends one page sized to the text box.
    Layout coordinates grow downwards from the top; PDF coordinates grow
    upwards from the bottom, so baselines are flipped per page.

    Pages live in the document of the view's current font metrics. Changing
    a font setting on the view replaces those metrics, so pages added before
    the change are not part of later output.
    """

    def __init__(self, view: YakuhanText) -> None:
        """Initialize PdfRenderer.

        Args:
            view: Text view to render. Must use the pdfium metrics backend.

        Raises:
            RenderError: If the view does not use PDFium metrics.
        """
        self._view = view
        self._metrics()
        self._page: Optional[Any] = None
        self._page_height = 0.0
        self._color = Color()

    def _metrics(self) -> PdfiumFontMetrics:
        metrics = self._view.metrics
        if not isinstance(metrics, PdfiumFontMetrics):
            raise RenderError(
                f"PDF rendering requires PDFium metrics, got {type(metrics).__name__}",
                stage="render",
            )
        return metrics

    @property
    def page_count(self) -> int:
        return len(self._metrics().document)

    def draw_glyph(self, x: float, y: float, glyph: str) -> None:
        """Insert a text object for one glyph with its baseline at ``(x, y)``."""
        if self._page is None:
            raise RenderError("draw_glyph called outside add_page()", stage="render")

        metrics = self._metrics()
        text_obj = pdfium.raw.FPDFPageObj_CreateTextObj(
            metrics.document.raw, metrics.font_handle, ctypes.c_float(metrics.font_size)
        )
        if not text_obj:
            raise RenderError(f"Failed to create text object for {glyph!r}", stage="render")

        if not pdfium.raw.FPDFText_SetText(text_obj, to_widestring(glyph)):
            pdfium.raw.FPDFPageObj_Destroy(text_obj)
            raise RenderError(f"Failed to set text {glyph!r}", stage="render")

        pdfium.raw.FPDFPageObj_SetFillColor(
            text_obj, self._color.r, self._color.g, self._color.b, 255
        )
        pdfium.raw.FPDFPageObj_Transform(
            text_obj,
            ctypes.c_double(1.0),
            ctypes.c_double(0.0),
            ctypes.c_double(0.0),
            ctypes.c_double(1.0),
            ctypes.c_double(x),
            ctypes.c_double(self._page_height - y),
        )
        pdfium.raw.FPDFPage_InsertObject(self._page.raw, text_obj)

    def add_page(self, max_width: float) -> LayoutResult:
        """Lay out the view on a new page.

        Args:
            max_width: Available width in points; also the page width.

        Returns:
            LayoutResult of the pass.
        """
        width, height = self._view.measure(max_width)
        pdf = self._metrics().document
        page = pdf.new_page(max(width, 1), max(height, 1))
        self._page = page
        self._page_height = float(max(height, 1))
        self._color = self._view.config.color
        try:
            result = self._view.draw(self, max_width)
            page.gen_content()
        finally:
            self._page = None
            page.close()

        logger.debug("Added PDF page %d with %d glyph(s)", len(pdf), len(result.placements))
        return result

    def to_bytes(self) -> bytes:
        """Export all pages as PDF bytes."""
        buffer = BytesIO()
        self._metrics().document.save(buffer)
        return buffer.getvalue()

    def save(self, output_path: Path) -> None:
        """Save all pages to a file.

        Args:
            output_path: Output file path
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(self.to_bytes())
