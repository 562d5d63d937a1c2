# SPDX-License-Identifier: Apache-2.0
"""Japanese text layout with yakuhan (half-width bracket) kerning."""

from yakuhan.core import LineComposer, compose, tokenize
from yakuhan.errors import FontLoadError, RenderError, YakuhanError
from yakuhan.view import TextViewConfig, YakuhanText

__version__ = "0.1.0"

__all__ = [
    "FontLoadError",
    "LineComposer",
    "RenderError",
    "TextViewConfig",
    "YakuhanError",
    "YakuhanText",
    "compose",
    "tokenize",
]
