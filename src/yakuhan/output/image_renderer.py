# SPDX-License-Identifier: Apache-2.0
"""Render a text view into a Pillow image."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Optional

from PIL import Image, ImageDraw, ImageFont

from yakuhan.core.metrics import REFERENCE_GLYPH, PillowFontMetrics
from yakuhan.core.models import LayoutResult
from yakuhan.errors import RenderError
from yakuhan.view import YakuhanText

logger = logging.getLogger(__name__)


class ImageRenderer:
    """Draw glyphs of a YakuhanText onto an RGBA image.

    The view must use the Pillow metrics backend so that glyphs are drawn
    with the same font they were measured with.
    """

    def __init__(
        self,
        view: YakuhanText,
        background: Optional[tuple[int, int, int, int]] = None,
    ) -> None:
        """Initialize ImageRenderer.

        Args:
            view: Text view to render.
            background: RGBA background; transparent when None.
        """
        self._view = view
        self._background = background or (0, 0, 0, 0)
        self._draw: Optional[ImageDraw.ImageDraw] = None
        self._font: Any = None
        self._fill: tuple[int, int, int] = (0, 0, 0)
        self._baseline_offset = 0.0

    def draw_glyph(self, x: float, y: float, glyph: str) -> None:
        """Draw one glyph with its baseline at ``(x, y)``."""
        if self._draw is None:
            raise RenderError("draw_glyph called outside render()", stage="render")
        if isinstance(self._font, ImageFont.FreeTypeFont):
            self._draw.text((x, y), glyph, font=self._font, fill=self._fill, anchor="ls")
        else:
            # Bitmap fonts do not support anchors; draw from the top-left corner
            # shifted by the reference glyph ascent
            self._draw.text(
                (x, y - self._baseline_offset), glyph, font=self._font, fill=self._fill
            )

    def render(self, max_width: float) -> tuple[Image.Image, LayoutResult]:
        """Measure, then draw the view into a new image.

        Args:
            max_width: Available width in pixels; also the image width.

        Returns:
            Tuple of (image, layout result).

        Raises:
            RenderError: If the view does not use Pillow metrics.
        """
        metrics = self._view.metrics
        if not isinstance(metrics, PillowFontMetrics):
            raise RenderError(
                f"Image rendering requires Pillow metrics, got {type(metrics).__name__}",
                stage="render",
            )

        width, height = self._view.measure(max_width)
        image = Image.new("RGBA", (max(width, 1), max(height, 1)), self._background)
        self._draw = ImageDraw.Draw(image)
        self._font = metrics.font
        if not isinstance(self._font, ImageFont.FreeTypeFont):
            _, _, _, bottom = self._font.getbbox(REFERENCE_GLYPH)
            self._baseline_offset = float(bottom)
        self._fill = self._view.config.color.to_rgb()
        try:
            result = self._view.draw(self, max_width)
        finally:
            self._draw = None

        logger.debug("Rendered %d glyph(s) into %dx%d image", len(result.placements), *image.size)
        return image, result

    def to_png(self, max_width: float) -> bytes:
        """Render and encode as PNG bytes."""
        image, _ = self.render(max_width)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def save(self, max_width: float, output_path: Path) -> LayoutResult:
        """Render and save as PNG.

        Args:
            max_width: Available width in pixels.
            output_path: Path to save the image.

        Returns:
            LayoutResult of the pass.
        """
        image, result = self.render(max_width)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        image.save(output_path, format="PNG")
        return result
