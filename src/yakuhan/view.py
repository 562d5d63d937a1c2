# SPDX-License-Identifier: Apache-2.0
"""Text view state: configuration, cached tokens and font metrics.

YakuhanText keeps the pieces that depend on configuration (tokens depend on
the text, metrics depend on font settings) and reruns the composer for every
measurement and draw, since composing is cheap and stateless.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Optional, Union

from yakuhan.core.composer import GlyphSink, LineComposer
from yakuhan.core.metrics import FontMetrics, PdfiumFontMetrics, PillowFontMetrics
from yakuhan.core.models import Color, LayoutResult, TextStyle
from yakuhan.core.tokenizer import tokenize

logger = logging.getLogger(__name__)

DEFAULT_TEXT_SIZE_SP = 12.0
DEFAULT_TEXT_COLOR = "#000000"
BACKENDS = ("pillow", "pdfium")

MetricsFactory = Callable[["TextViewConfig"], FontMetrics]


def sp_to_px(sp: float, scaled_density: float = 1.0) -> float:
    """Convert scale-independent units to pixels."""
    return sp * scaled_density


@dataclass(frozen=True)
class TextViewConfig:
    """Text view configuration.

    Attributes:
        text_color: Hex color of the glyphs.
        text_size: Text size in scale-independent units.
        scaled_density: Pixels per scale-independent unit.
        font_path: Font file; None selects the backend's default font.
        text_style: Font style.
        max_lines: Maximum number of lines, None for no limit.
        kerning_only_first_char: Kern only the first character of the text.
        spacing_multiplier: Line height multiplier.
        spacing_addition: Extra pixels added to the line height.
        backend: Metrics backend, ``"pillow"`` or ``"pdfium"``.
    """

    text_color: str = DEFAULT_TEXT_COLOR
    text_size: float = DEFAULT_TEXT_SIZE_SP
    scaled_density: float = 1.0
    font_path: Optional[Path] = None
    text_style: TextStyle = TextStyle.NORMAL
    max_lines: Optional[int] = None
    kerning_only_first_char: bool = False
    spacing_multiplier: float = 1.0
    spacing_addition: float = 0.0
    backend: str = "pillow"

    def __post_init__(self) -> None:
        if self.max_lines is not None and self.max_lines < 1:
            raise ValueError(f"max_lines must be >= 1, got {self.max_lines}")
        if self.text_size <= 0:
            raise ValueError(f"text_size must be > 0, got {self.text_size}")
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend: {self.backend!r}")
        # Validate early so a bad color fails at configuration time
        Color.from_hex(self.text_color)

    @property
    def text_size_px(self) -> float:
        return sp_to_px(self.text_size, self.scaled_density)

    @property
    def color(self) -> Color:
        return Color.from_hex(self.text_color)


# Settings that change glyph metrics; anything else keeps cached metrics
_METRICS_FIELDS = frozenset(
    {
        "text_size",
        "scaled_density",
        "font_path",
        "text_style",
        "spacing_multiplier",
        "spacing_addition",
        "backend",
    }
)


def create_metrics(config: TextViewConfig) -> FontMetrics:
    """Create the metrics backend selected by the configuration.

    Args:
        config: Text view configuration.

    Returns:
        FontMetrics for the configured font and size.

    Raises:
        FontLoadError: If the configured font cannot be loaded.
    """
    if config.backend == "pdfium":
        return PdfiumFontMetrics(
            font_size=config.text_size_px,
            font_path=config.font_path,
            style=config.text_style,
            spacing_multiplier=config.spacing_multiplier,
            spacing_addition=config.spacing_addition,
        )
    return PillowFontMetrics(
        font_size=config.text_size_px,
        font_path=config.font_path,
        style=config.text_style,
        spacing_multiplier=config.spacing_multiplier,
        spacing_addition=config.spacing_addition,
    )


class YakuhanText:
    """Japanese-aware text block with yakuhan kerning.

    Example:
        >>> view = YakuhanText("「こんにちは。」", TextViewConfig(max_lines=2))
        >>> width, height = view.measure(200)
    """

    def __init__(
        self,
        text: str = "",
        config: Optional[TextViewConfig] = None,
        metrics_factory: Optional[MetricsFactory] = None,
    ) -> None:
        """Initialize YakuhanText.

        Args:
            text: Initial text.
            config: View configuration (defaults apply when None).
            metrics_factory: Builds FontMetrics from a configuration;
                defaults to :func:`create_metrics`.
        """
        self._config = config or TextViewConfig()
        self._metrics_factory = metrics_factory or create_metrics
        self._metrics: Optional[FontMetrics] = None
        self._text = ""
        self._tokens: list[str] = []
        self.text = text

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: Union[str, bytes]) -> None:
        self._tokens = tokenize(value)
        self._text = "".join(self._tokens)

    @property
    def tokens(self) -> list[str]:
        """Tokens of the current text (a copy)."""
        return list(self._tokens)

    @property
    def config(self) -> TextViewConfig:
        return self._config

    @config.setter
    def config(self, value: TextViewConfig) -> None:
        if any(
            getattr(value, f.name) != getattr(self._config, f.name)
            for f in fields(value)
            if f.name in _METRICS_FIELDS
        ):
            self._release_metrics()
        self._config = value

    def configure(self, **changes: Any) -> TextViewConfig:
        """Replace configuration fields.

        Args:
            **changes: TextViewConfig fields to change.

        Returns:
            The new configuration.
        """
        self.config = replace(self._config, **changes)
        return self._config

    @property
    def metrics(self) -> FontMetrics:
        """Font metrics for the current configuration, created on demand."""
        if self._metrics is None:
            self._metrics = self._metrics_factory(self._config)
        return self._metrics

    def _release_metrics(self) -> None:
        close = getattr(self._metrics, "close", None)
        if callable(close):
            close()
        self._metrics = None

    def close(self) -> None:
        """Release font resources held by the metrics backend."""
        self._release_metrics()

    def __enter__(self) -> YakuhanText:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _composer(self) -> LineComposer:
        return LineComposer(
            self.metrics,
            kerning_only_first_char=self._config.kerning_only_first_char,
            max_lines=self._config.max_lines,
        )

    def measure(self, max_width: float) -> tuple[int, int]:
        """Measure the text box for an available width.

        Args:
            max_width: Available width in pixels.

        Returns:
            ``(width, height)``; the width is the available width and the
            height covers every composed line.
        """
        result = self._composer().measure(self._tokens, max_width)
        logger.debug(
            "Measured %d token(s): %d line(s), height %d",
            len(self._tokens),
            result.line_count,
            result.height,
        )
        return int(max_width), result.height

    def layout(self, max_width: float) -> LayoutResult:
        """Compute glyph placements without drawing."""
        return self._composer().render(self._tokens, max_width)

    def draw(self, sink: GlyphSink, max_width: float) -> LayoutResult:
        """Draw every glyph into a sink.

        Args:
            sink: Receiver of ``draw_glyph(x, y, glyph)`` calls.
            max_width: Available width in pixels.

        Returns:
            LayoutResult of the pass.
        """
        return self._composer().render(self._tokens, max_width, sink=sink)
