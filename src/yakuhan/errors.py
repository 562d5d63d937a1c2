# SPDX-License-Identifier: Apache-2.0
"""Error definitions."""

from __future__ import annotations


class YakuhanError(Exception):
    """Base exception for font and rendering errors."""

    def __init__(
        self,
        message: str,
        stage: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.cause = cause


class FontLoadError(YakuhanError):
    """Font file missing or rejected by the metrics backend."""


class RenderError(YakuhanError):
    """Output could not be produced."""
