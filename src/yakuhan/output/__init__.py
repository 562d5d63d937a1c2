# SPDX-License-Identifier: Apache-2.0
"""Renderers that draw laid out glyphs into images and PDF pages."""

from yakuhan.output.image_renderer import ImageRenderer
from yakuhan.output.pdf_renderer import PdfRenderer

__all__ = [
    "ImageRenderer",
    "PdfRenderer",
]
