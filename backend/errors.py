"""Exception hierarchy for the clone pipeline.

``UrlValidationError``
    Bad request input.  Mapped to HTTP 400 by the API layer.
``RenderError``
    Browser launch, navigation or evaluation failed.  Fatal to the request.
``GenerationError`` / ``ParseError``
    The model call or its reply was unusable.  Absorbed by the generation
    client, which substitutes fallback code.
"""

from __future__ import annotations


class CloneError(Exception):
    """Base class for every error raised by the clone pipeline."""


class UrlValidationError(CloneError):
    """The requested URL is missing or malformed."""

    def __init__(self, error: str, message: str) -> None:
        super().__init__(f"{error}: {message}")
        self.error = error
        self.message = message


class RenderError(CloneError):
    """The headless browser could not produce a rendered page."""


class GenerationError(CloneError):
    """The code generation model failed or returned something unusable."""


class ParseError(GenerationError):
    """The model reply could not be coerced into schema + route code."""
