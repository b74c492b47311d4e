"""
Unit tests for cssinjs.styles.

These tests cover:
- property name hyphenation (including the `ms` vendor prefix)
- value formatting: px suffixing, unitless properties, floats, bools
- fallback lists
- parse_styles: sorting, nesting, reserved keys, None values, bad keys
"""

from __future__ import annotations

import math
import re

import pytest

from cssinjs.errors import CssInJsError, ErrorCode
from cssinjs.styles import (
    ParsedStyles,
    ensure_style_object,
    format_value,
    hyphenate,
    parse_styles,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("color", "color"),
        ("backgroundColor", "background-color"),
        ("WebkitTransition", "-webkit-transition"),
        ("msTransition", "-ms-transition"),
        ("--custom-prop", "--custom-prop"),
    ],
)
def test_hyphenate(name: str, expected: str) -> None:
    """Test camelCase names map to CSS property names."""
    assert hyphenate(name) == expected


@pytest.mark.parametrize(
    ("prop", "value", "expected"),
    [
        ("width", 10, "10px"),
        ("width", 0, "0"),
        ("width", 1.5, "1.5px"),
        ("width", 2.0, "2px"),
        ("opacity", 0.5, "0.5"),
        ("z-index", 3, "3"),
        ("-webkit-flex-grow", 1, "1"),
        ("width", math.nan, "NaN"),
        ("width", "50%", "50%"),
        ("display", True, "true"),
    ],
)
def test_format_value(prop: str, value: object, expected: str) -> None:
    """Test scalar values render as CSS text."""
    assert format_value(prop, value) == expected


def test_format_value_rejects_unsupported_types() -> None:
    """Test unsupported value types raise TypeError with a code."""
    with pytest.raises(
        TypeError, match=re.escape("Invalid CSS property value. Property 'width'")
    ) as exc:
        format_value("width", object())

    assert isinstance(exc.value.__cause__, CssInJsError)
    assert exc.value.__cause__.code == ErrorCode.INVALID_STYLE_VALUE


def test_parse_styles_sorts_declarations_and_keeps_nested_order() -> None:
    """Test declarations sort by property and nested entries keep order."""
    parsed = parse_styles(
        {
            "zIndex": 2,
            "& b": {"color": "red"},
            "color": "blue",
            "& a": {"color": "green"},
        }
    )

    assert parsed == ParsedStyles(
        declarations="color:blue;z-index:2",
        nested=(("& b", {"color": "red"}), ("& a", {"color": "green"})),
        is_unique=False,
    )


def test_parse_styles_sort_nested() -> None:
    """Test nested entries are sorted on request."""
    parsed = parse_styles(
        {"to": {"opacity": 1}, "from": {"opacity": 0}}, sort_nested=True
    )
    assert [key for key, _ in parsed.nested] == ["from", "to"]


def test_parse_styles_skips_reserved_keys_and_none() -> None:
    """Test `$` keys and None values produce no declarations."""
    parsed = parse_styles({"$unique": True, "$displayName": "X", "color": None})
    assert parsed.declarations == ""
    assert parsed.nested == ()
    assert parsed.is_unique is True


def test_parse_styles_strips_keys() -> None:
    """Test surrounding whitespace in keys is ignored."""
    parsed = parse_styles({" color ": "red", " & a ": {"margin": 0}})
    assert parsed.declarations == "color:red"
    assert parsed.nested[0][0] == "& a"


def test_parse_styles_fallback_list() -> None:
    """Test list values emit one declaration per entry."""
    parsed = parse_styles({"display": ["-webkit-box", "flex"], "width": [10, "50%"]})
    assert parsed.declarations == (
        "display:-webkit-box;display:flex;width:10px;width:50%"
    )


def test_parse_styles_rejects_non_string_keys() -> None:
    """Test non-string keys raise TypeError."""
    with pytest.raises(TypeError, match=re.escape("style keys must be strings")):
        parse_styles({1: "red"})  # type: ignore[dict-item]


@pytest.mark.parametrize("value", [None, 5, "color: red", ["color"]])
def test_ensure_style_object_rejects_non_mappings(value: object) -> None:
    """Test non-mapping inputs raise TypeError with a code."""
    with pytest.raises(
        TypeError, match=re.escape("CSS must be an object of key/value pairs.")
    ) as exc:
        ensure_style_object(value)

    assert exc.value.__cause__.code == ErrorCode.INVALID_STYLE_OBJECT


def test_ensure_style_object_returns_input() -> None:
    """Test mappings pass through unchanged."""
    styles = {"color": "red"}
    assert ensure_style_object(styles) is styles
