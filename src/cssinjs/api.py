"""
cssinjs.api.

Public entry points. Each inserting entry point is an explicit two-stage
pipeline: compile (`make_*`) then insert into the current document.

- `css`: memoized by object identity in the active document's cache, returns
  the class name.
- `global_css`: not memoized, returns nothing.
- `keyframes`: not memoized, returns the animation name.

Global styles and keyframes are usually declared once per module, so they
recompile on each call; the insertion gate still writes them once per page.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .compile import GLOBAL_FLAG, CompiledRule, compile_styles
from .errors import raise_invalid_animation_name
from .sheet import current_document, insert_rule
from .styles import ensure_style_object

if TYPE_CHECKING:
    from collections.abc import Mapping

# -----------------------------------------------------------------------------
# Compile without inserting
# -----------------------------------------------------------------------------


def make_css(styles: Mapping[str, Any]) -> CompiledRule:
    """Compile namespaced styles into a class name and CSS text.

    Args:
        styles: Style object.

    Returns:
        CompiledRule: Class name and CSS scoped to it.

    Raises:
        TypeError: If `styles` is not a mapping.
    """
    ensure_style_object(styles)
    return compile_styles(styles)


def make_global(styles: Mapping[str, Any]) -> CompiledRule:
    """Compile global styles (bare selectors, no class wrapper).

    The caller's mapping is never mutated.

    Args:
        styles: Style object keyed by selectors.

    Returns:
        CompiledRule: The identifier is computed but has no use for globals.
    """
    ensure_style_object(styles)
    return compile_styles(styles, is_global=True)


def make_keyframes_auto(styles: Mapping[str, Any]) -> CompiledRule:
    """Compile a keyframes block named after its content hash.

    Args:
        styles: Keyframe stops (`from`, `to`, percentages).

    Returns:
        CompiledRule: Generated animation name and `@keyframes` CSS.
    """
    ensure_style_object(styles)
    return compile_styles({GLOBAL_FLAG: True, "@keyframes &": styles})


def make_keyframes_named(name: str, styles: Mapping[str, Any]) -> CompiledRule:
    """Compile a keyframes block with a caller-chosen animation name.

    Args:
        name: Animation name, used verbatim.
        styles: Keyframe stops.

    Returns:
        CompiledRule: `name` and the `@keyframes` CSS.

    Raises:
        TypeError: If `name` is not a string or `styles` is not a mapping.
    """
    if not isinstance(name, str):
        raise_invalid_animation_name(got=name)
    ensure_style_object(styles)
    rule = compile_styles({GLOBAL_FLAG: True, f"@keyframes {name}": styles})
    return CompiledRule(identifier=name, css_text=rule.css_text)


def make_keyframes(
    name_or_styles: str | Mapping[str, Any],
    styles: Mapping[str, Any] | None = None,
) -> CompiledRule:
    """Compile keyframes; the name is optional.

    `make_keyframes(styles)` generates the name, `make_keyframes(name, styles)`
    uses `name` verbatim.
    """
    if styles is None:
        return make_keyframes_auto(name_or_styles)  # type: ignore[arg-type]
    return make_keyframes_named(name_or_styles, styles)  # type: ignore[arg-type]


# -----------------------------------------------------------------------------
# Compile and insert
# -----------------------------------------------------------------------------


def css(styles: Mapping[str, Any]) -> str:
    """Insert namespaced CSS and return the class name to use.

    Compilation is memoized per style object in the active document's
    `memo_cache`, so passing the same object again costs a dictionary lookup.
    Plain `dict` entries are released with the document; `StyleDict` entries
    are released as soon as the dict is.

    Raises:
        TypeError: If `styles` is not a mapping.
        RuntimeError: If there is no document to insert into.
    """
    ensure_style_object(styles)
    doc = current_document()
    return doc.insert(doc.memo_cache.get_or_create(styles, make_css))


def global_css(styles: Mapping[str, Any]) -> None:
    """Insert globally scoped CSS."""
    insert_rule(make_global(styles))


def keyframes(
    name_or_styles: str | Mapping[str, Any],
    styles: Mapping[str, Any] | None = None,
) -> str:
    """Insert a keyframes block and return its animation name.

    Use the result as an `animationName` value.
    """
    return insert_rule(make_keyframes(name_or_styles, styles))
