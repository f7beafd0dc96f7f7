"""CSS assembly for rendered pages.

The browser hands back raw material (``<style>`` text, stylesheet hrefs and
one computed-style snapshot per class name); this module turns it into the
single CSS string returned to clients.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Sequence, Tuple

# Visual properties captured from ``getComputedStyle`` for each class name.
COMPUTED_STYLE_PROPERTIES: Tuple[str, ...] = (
    "background-color",
    "color",
    "font-size",
    "font-weight",
    "font-family",
    "padding",
    "margin",
    "border",
    "border-radius",
    "display",
    "width",
    "height",
    "background-image",
    "background-size",
    "background-position",
    "box-shadow",
    "text-align",
    "line-height",
    "opacity",
    "position",
    "z-index",
    "overflow",
)

# Values that add nothing to a synthesized rule.
NOOP_VALUES = frozenset({"none", "normal", "rgba(0, 0, 0, 0)"})

_AUTO_SIZED = frozenset({"width", "height"})

COMPUTED_HEADER = "\n\n/* Computed Styles for better accuracy */\n"

_CSS_IDENT_UNSAFE = re.compile(r"([^\w-])")
# An identifier may not start with a digit, nor with a hyphen and then a digit.
_LEADING_DIGIT = re.compile(r"^(-?)([0-9])")


def _escape_class(name: str) -> str:
    """Escape characters that are not valid in a bare CSS class selector."""
    escaped = _CSS_IDENT_UNSAFE.sub(r"\\\1", name)
    return _LEADING_DIGIT.sub(r"\1\\3\2 ", escaped)


def _keep(prop: str, value: str | None) -> bool:
    if not value:
        return False
    value = value.strip()
    if not value or value in NOOP_VALUES:
        return False
    if prop in _AUTO_SIZED and value == "auto":
        return False
    return True


def build_class_rule(class_name: str, snapshot: Mapping[str, str | None]) -> str:
    """Render one computed-style snapshot as a CSS rule block.

    Properties are emitted in :data:`COMPUTED_STYLE_PROPERTIES` order; keys
    outside the allow-list are ignored.
    """
    lines = [f".{_escape_class(class_name)} {{"]
    for prop in COMPUTED_STYLE_PROPERTIES:
        value = snapshot.get(prop)
        if _keep(prop, value):
            lines.append(f"  {prop}: {value.strip()};")  # type: ignore[union-attr]
    lines.append("}")
    return "\n".join(lines) + "\n\n"


def build_computed_css(class_styles: Iterable[Sequence]) -> str:
    """Build rules from ``[class_name, snapshot]`` pairs.

    Only the first snapshot seen for a class name is used.
    """
    seen: set[str] = set()
    rules: list[str] = []
    for class_name, snapshot in class_styles:
        if not class_name or class_name in seen:
            continue
        seen.add(class_name)
        rules.append(build_class_rule(class_name, snapshot or {}))
    return "".join(rules)


def assemble_css(
    styles: Iterable[str],
    stylesheets: Iterable[str],
    class_styles: Iterable[Sequence] | None = None,
) -> str:
    """Concatenate inline style text, stylesheet placeholders and computed rules.

    External stylesheets are never fetched; each ``href`` becomes a comment.
    ``class_styles`` of ``None`` means computed styles were not collected and
    the computed section is omitted entirely.
    """
    css = "".join(f"{text}\n" for text in styles)
    css += "".join(f"/* External stylesheet: {href} */\n" for href in stylesheets if href)
    if class_styles is not None:
        css += COMPUTED_HEADER + build_computed_css(class_styles)
    return css
