"""Coercion of free-form model replies into :class:`GeneratedCode`.

Models do not reliably honour "return only JSON".  The heuristic here is
best effort: strip code fences, keep the span between the first ``{`` and the
last ``}``, and parse that.  A brace inside a string value that sits outside
the intended object will still confuse it.
"""

from __future__ import annotations

import json
import re

from backend.errors import ParseError
from backend.generator.models import GeneratedCode

_FENCE_JSON_RE = re.compile(r"```json\n?", re.IGNORECASE)
_FENCE_RE = re.compile(r"```\n?")

REQUIRED_KEYS = ("sqlSchema", "nodeRoute")


def strip_fences(text: str) -> str:
    """Remove markdown code-fence markers and surrounding whitespace."""
    text = text.strip()
    text = _FENCE_JSON_RE.sub("", text)
    text = _FENCE_RE.sub("", text)
    return text.strip()


def narrow_to_object(text: str) -> str:
    """Return the substring from the first ``{`` to the last ``}`` inclusive.

    *text* is returned unchanged when either brace is missing or they are out
    of order.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return text
    return text[start : end + 1]


def parse_generated_code(text: str) -> GeneratedCode:
    """Coerce a raw model reply into a :class:`GeneratedCode`.

    Raises:
        ParseError: If the reply is not a JSON object, or either required key
            is missing, not a string, or blank.
    """
    candidate = narrow_to_object(strip_fences(text or ""))

    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ParseError(f"AI returned invalid JSON format: {exc}") from exc

    if not isinstance(payload, dict):
        raise ParseError("AI returned JSON that is not an object")

    missing = [
        key
        for key in REQUIRED_KEYS
        if not isinstance(payload.get(key), str) or not payload[key].strip()
    ]
    if missing:
        raise ParseError(
            f"AI response missing required fields ({', '.join(missing)})"
        )

    return GeneratedCode(sql_schema=payload["sqlSchema"], node_route=payload["nodeRoute"])
