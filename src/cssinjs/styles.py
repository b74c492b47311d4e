"""
cssinjs.styles.

Style object validation and normalization utilities for cssinjs.

A style object is a nested mapping in the shape CSS-in-JS authors write:

    {
        "color": "white",
        "backgroundColor": "black",
        "& > li:hover": {"textDecoration": "underline"},
        "@media (min-width: 300px)": {"fontSize": 18},
    }

Normalization splits each level into
1) a canonical declaration string (hyphenated property names, formatted values,
   sorted by property name so key order never matters), and
2) the nested entries (selectors and at-rules) in mapping order, or sorted when
   the caller asks for it (keyframe stops).

Reserved keys start with `$` and never become declarations:
- `$global`: emit bare selectors without the generated class (see compile).
- `$unique`: never merge this block with an identical declaration block.
- `$displayName`: readable class-name prefix in debug mode.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from .errors import raise_invalid_style_object, raise_invalid_style_value

# -----------------------------------------------------------------------------
# Property naming
# -----------------------------------------------------------------------------

_UPPER_RE: Final[re.Pattern[str]] = re.compile(r"[A-Z]")
_MS_PREFIX_RE: Final[re.Pattern[str]] = re.compile(r"^ms-")

# CSS properties that accept bare numbers; everything else gets `px`.
_UNITLESS_PROPERTIES: Final[tuple[str, ...]] = (
    "animation-iteration-count",
    "border-image-outset",
    "border-image-slice",
    "border-image-width",
    "box-flex",
    "box-flex-group",
    "box-ordinal-group",
    "column-count",
    "columns",
    "counter-increment",
    "counter-reset",
    "flex",
    "flex-grow",
    "flex-positive",
    "flex-shrink",
    "flex-negative",
    "flex-order",
    "font-weight",
    "grid-area",
    "grid-column",
    "grid-column-end",
    "grid-column-span",
    "grid-column-start",
    "grid-row",
    "grid-row-end",
    "grid-row-span",
    "grid-row-start",
    "line-clamp",
    "line-height",
    "opacity",
    "order",
    "orphans",
    "tab-size",
    "widows",
    "z-index",
    "zoom",
    # SVG properties
    "fill-opacity",
    "flood-opacity",
    "stop-opacity",
    "stroke-dasharray",
    "stroke-dashoffset",
    "stroke-miterlimit",
    "stroke-opacity",
    "stroke-width",
)

UNITLESS: Final[frozenset[str]] = frozenset(
    prefix + prop
    for prop in _UNITLESS_PROPERTIES
    for prefix in ("-webkit-", "-ms-", "-moz-", "-o-", "")
)


def hyphenate(name: str) -> str:
    """Transform a camelCase property name into a CSS property name.

    Args:
        name: Property name as written in the style object.

    Returns:
        Hyphenated property name (`msTransition` -> `-ms-transition`).
    """
    out = _UPPER_RE.sub(lambda m: f"-{m.group(0).lower()}", name)
    return _MS_PREFIX_RE.sub("-ms-", out)


# -----------------------------------------------------------------------------
# Value formatting
# -----------------------------------------------------------------------------


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, int) or value.is_integer():
        return str(int(value))
    return repr(value)


def format_value(prop: str, value: object) -> str:
    """Render a single property value as CSS text.

    Args:
        prop: Hyphenated property name (decides whether numbers get `px`).
        value: Scalar property value.

    Returns:
        The value as it appears after the colon in a declaration.

    Raises:
        TypeError: If the value is not a string, number or bool.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        text = _format_number(value)
        # NaN compares unequal to itself and stays unitless.
        if value != 0 and value == value and prop not in UNITLESS:
            return f"{text}px"
        return text
    if isinstance(value, str):
        return value
    raise_invalid_style_value(prop=prop, value=value)


def _declaration(prop: str, value: object) -> str:
    if isinstance(value, (list, tuple)):
        # Fallbacks: `display: ["-webkit-flex", "flex"]`.
        return ";".join(f"{prop}:{format_value(prop, v)}" for v in value)
    return f"{prop}:{format_value(prop, value)}"


# -----------------------------------------------------------------------------
# Normalized level representation
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParsedStyles:
    """One level of a style object, split into declarations and children.

    Attributes:
        declarations: Canonical declaration text, e.g. `color:red;margin:0`.
        nested: `(key, child)` pairs for selector and at-rule entries.
        is_unique: Whether `$unique` was set on this level.
    """

    declarations: str
    nested: tuple[tuple[str, Mapping[str, Any]], ...]
    is_unique: bool


def ensure_style_object(x: object, *, name: str = "styles") -> Mapping[str, Any]:
    """
    Ensure x is a style object (a mapping).

    Args:
        x: Input value.
        name: Argument name for error messages.

    Returns:
        The input, unchanged.
    """
    if not isinstance(x, Mapping):
        raise_invalid_style_object(got=x, detail=f"{name} must be a mapping")
    return x


def parse_styles(
    styles: Mapping[str, Any], *, sort_nested: bool = False
) -> ParsedStyles:
    """
    Normalize one level of a style object.

    Args:
        styles: Style mapping for this level.
        sort_nested: Sort nested entries by key instead of keeping mapping order.

    Returns:
        ParsedStyles: Declarations plus nested entries.
    """
    properties: list[tuple[str, object]] = []
    nested: list[tuple[str, Mapping[str, Any]]] = []

    for key, value in styles.items():
        if not isinstance(key, str):
            raise_invalid_style_object(got=key, detail="style keys must be strings")
        key_s = key.strip()
        if key_s.startswith("$") or value is None:
            continue
        if isinstance(value, Mapping):
            nested.append((key_s, value))
        else:
            properties.append((hyphenate(key_s), value))

    properties.sort(key=lambda item: item[0])
    if sort_nested:
        nested.sort(key=lambda item: item[0])

    return ParsedStyles(
        declarations=";".join(_declaration(p, v) for p, v in properties),
        nested=tuple(nested),
        is_unique=bool(styles.get("$unique")),
    )
