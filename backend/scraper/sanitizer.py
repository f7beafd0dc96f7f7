"""Markup cleanup applied to every rendered page before it leaves the renderer.

This is a cosmetic pass for previews and prompts.  It is *not* a security
boundary: the tracking list is short and deliberately incomplete.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_BLOCK_RE = re.compile(
    r"<(script|iframe|noscript)\b[^>]*>.*?</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)

# Unpaired opening/closing tags left behind by malformed markup.
_STRAY_TAG_RE = re.compile(r"</?(?:script|iframe|noscript)[^>]*>?", re.IGNORECASE)

_TRACKING_PATTERNS = [
    re.compile(
        r"<!--(?:(?!-->).)*?(?:google\s+analytics|gtag)(?:(?!-->).)*?-->",
        re.IGNORECASE | re.DOTALL,
    ),
    re.compile(r"\s?data-gtm-[\w-]*=\"[^\"]*\"", re.IGNORECASE),
    re.compile(r"\bga\([^)]*\)", re.IGNORECASE),
]

_WHITESPACE_RE = re.compile(r"\s+")
_INTER_TAG_RE = re.compile(r">\s+<")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _strip_once(html: str) -> str:
    for pattern in _TRACKING_PATTERNS:
        html = pattern.sub("", html)
    html = _BLOCK_RE.sub("", html)
    return _STRAY_TAG_RE.sub("", html)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sanitize_html(html: str) -> str:
    """Return *html* without scripts, iframes, noscript blocks or known trackers.

    Removal is repeated until nothing more matches, so splicing tricks such as
    ``<scr<script></script>ipt>`` cannot reassemble a tag.  Whitespace runs are
    then collapsed to one space and whitespace between tags is dropped.

    The transform is idempotent: ``sanitize_html(sanitize_html(x)) ==
    sanitize_html(x)``.
    """
    cleaned = _strip_once(html)
    while cleaned != html:
        html = cleaned
        cleaned = _strip_once(html)

    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    cleaned = _INTER_TAG_RE.sub("><", cleaned)
    return cleaned.strip()
