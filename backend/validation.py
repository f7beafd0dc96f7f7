"""Input validation for clone requests."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlsplit

from backend.errors import UrlValidationError

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")
_WHITESPACE_RE = re.compile(r"\s")


def _required() -> UrlValidationError:
    return UrlValidationError("URL is required", "Please provide a valid URL to clone")


def _invalid() -> UrlValidationError:
    return UrlValidationError("Invalid URL", "Please provide a valid URL format")


def validate_url(value: Any) -> str:
    """Return *value* stripped if it is an absolute URL, else raise.

    An absolute URL here means a syntactically valid scheme followed by a
    non-empty network location (``https://example.com``), with no embedded
    whitespace and a numeric port if one is given.

    Raises:
        UrlValidationError: ``"URL is required"`` for a missing, non-string or
            blank value; ``"Invalid URL"`` for anything else that does not parse.
    """
    if not isinstance(value, str) or not value.strip():
        raise _required()

    url = value.strip()
    if _WHITESPACE_RE.search(url):
        raise _invalid()

    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a non-numeric or out-of-range port
    except ValueError as exc:
        raise _invalid() from exc

    if not _SCHEME_RE.match(parts.scheme) or not parts.netloc or not parts.hostname:
        raise _invalid()

    return url
