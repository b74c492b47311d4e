"""
cssinjs.compile.

Compile style objects into a deterministic class name and CSS text.

This module is the content-addressed style registry: it never touches a page
and never caches. The same structural input always yields the same
`CompiledRule`, whatever the object identity or property key order.

Contract
--------
- Identifier: `"f" + string_hash(signature)` where the signature is the
  canonical declaration text of each level followed by `|<key>#<child>` for
  every nested entry, in emission order.
- Nested selectors: `&` is replaced by the parent selector; selectors without
  `&` are appended to the parent with a descendant space. Selector lists are
  expanded branch by branch.
- At-rules wrap their nested rules. Children of `@keyframes` are sorted by key.
- Within one container, blocks with identical declarations share a single
  block (unless `$unique`), and declaration blocks precede at-rule blocks.
- Raises built-in exceptions and chains `CssInJsError` as the cause via helpers
  in `cssinjs.errors`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from .config import get_settings
from .styles import ensure_style_object, parse_styles

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

logger = logging.getLogger(__name__)

NESTING_MARKER: Final[str] = "&"
GLOBAL_FLAG: Final[str] = "$global"
DISPLAY_NAME_KEY: Final[str] = "$displayName"

_BASE36: Final[str] = "0123456789abcdefghijklmnopqrstuvwxyz"
_ESCAPE_RE: Final[re.Pattern[str]] = re.compile(
    r"""[ !#$%&()*+,./;<=>?@\[\]^`{|}~"'\\]"""
)
_KEYFRAMES_RE: Final[re.Pattern[str]] = re.compile(r"^@(?:-[a-z]+-)?keyframes\b")


# -----------------------------------------------------------------------------
# Public compiled object
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CompiledRule:
    """A compiled style object.

    Unpacks like a pair: `class_name, css_text = compile_styles(styles)`.

    Attributes:
        identifier: Class name (or animation name for keyframes).
        css_text: Serialized CSS implementing the style object.
    """

    identifier: str
    css_text: str

    def __iter__(self) -> Iterator[str]:
        yield self.identifier
        yield self.css_text


# -----------------------------------------------------------------------------
# Hashing
# -----------------------------------------------------------------------------


def _utf16_units(text: str) -> Iterator[int]:
    for ch in text:
        cp = ord(ch)
        if cp > 0xFFFF:
            cp -= 0x10000
            yield 0xD800 | (cp >> 10)
            yield 0xDC00 | (cp & 0x3FF)
        else:
            yield cp


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def string_hash(text: str) -> str:
    """Hash a string to a short base-36 token.

    djb2 with XOR, folded over UTF-16 code units from the last unit to the
    first with 32-bit wraparound, so identifiers match the ones browsers
    compute for the same style objects.

    Args:
        text: Input string.

    Returns:
        Unsigned 32-bit hash rendered in base 36.
    """
    value = 5381
    for unit in reversed(list(_utf16_units(text))):
        value = _to_int32(value * 33) ^ unit
    return _base36(value & 0xFFFFFFFF)


def escape(name: str) -> str:
    """Escape a class name for use in a selector."""
    return _ESCAPE_RE.sub(lambda m: "\\" + m.group(0), name)


# -----------------------------------------------------------------------------
# Selector expansion
# -----------------------------------------------------------------------------


def split_selector_list(selector: str) -> list[str]:
    """Split a selector list on top-level commas.

    Commas inside parentheses (`:is(a, b)`), attribute brackets, quotes, or
    escaped with a backslash do not split.

    Args:
        selector: Selector or comma-separated selector list.

    Returns:
        Stripped selector branches, in order.
    """
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    start = 0
    i = 0
    while i < len(selector):
        ch = selector[i]
        if ch == "\\":
            i += 2
            continue
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif ch == "," and depth == 0:
            parts.append(selector[start:i].strip())
            start = i + 1
        i += 1
    parts.append(selector[start:].strip())
    return parts


def interpolate(selector: str, parent: str) -> str:
    """Resolve a nested selector against its parent selector.

    Every parent branch is combined with every child branch on its own, so a
    pseudo-class nested under `a, b` becomes `a:hover,b:hover` and never
    `a, b:hover`.

    Args:
        selector: Nested selector as written (may contain `&`).
        parent: Fully expanded parent selector.

    Returns:
        The expanded selector, branches joined with `,`.
    """
    branches: list[str] = []
    for outer in split_selector_list(parent):
        for inner in split_selector_list(selector):
            if NESTING_MARKER in inner:
                branches.append(inner.replace(NESTING_MARKER, outer))
            else:
                branches.append(f"{outer} {inner}")
    return ",".join(branches)


# -----------------------------------------------------------------------------
# Stylize: walk a style object into flat blocks and at-rules
# -----------------------------------------------------------------------------


@dataclass(slots=True)
class _Block:
    selector: str
    declarations: str
    is_unique: bool


@dataclass(slots=True)
class _AtRule:
    prelude: str
    declarations: str
    blocks: list[_Block] = field(default_factory=list)
    rules: list[_AtRule] = field(default_factory=list)


def _stylize(
    styles: Mapping[str, Any],
    selector: str,
    blocks: list[_Block],
    rules: list[_AtRule],
    parent: str | None = None,
) -> str:
    """Flatten one level of a style object and return its signature.

    Args:
        styles: Style mapping for this level.
        selector: Key this level was found under (`&` or `""` at the root).
        blocks: Output list for declaration blocks of the current container.
        rules: Output list for at-rules of the current container.
        parent: Expanded selector of the enclosing rule, if any.

    Returns:
        Canonical signature of this level, used for hashing.
    """
    is_keyframes = bool(_KEYFRAMES_RE.match(selector))
    parsed = parse_styles(styles, sort_nested=is_keyframes)
    signature = parsed.declarations

    if selector.startswith("@"):
        rule = _AtRule(selector, "" if parent else parsed.declarations)
        rules.append(rule)

        # Nested at-rule support (e.g. `& > li` > `@media` > `color`).
        if parsed.declarations and parent:
            rule.blocks.append(_Block(parent, parsed.declarations, parsed.is_unique))

        # Keyframe stops are never qualified by the enclosing selector.
        child_parent = None if is_keyframes else parent
        for key, child in parsed.nested:
            signature += f"|{key}#" + _stylize(
                child, key, rule.blocks, rule.rules, child_parent
            )
        return signature

    expanded = interpolate(selector, parent) if parent else selector
    if parsed.declarations:
        if expanded:
            blocks.append(_Block(expanded, parsed.declarations, parsed.is_unique))
        else:
            logger.warning(
                "Dropping declarations without a selector in global styles: %s",
                parsed.declarations,
            )

    for key, child in parsed.nested:
        signature += f"|{key}#" + _stylize(child, key, blocks, rules, expanded)
    return signature


# -----------------------------------------------------------------------------
# Compose: merge flat blocks into CSS text
# -----------------------------------------------------------------------------


@dataclass(slots=True)
class _StyleOut:
    declarations: str
    selectors: list[str] = field(default_factory=list)

    def render(self) -> str:
        return f"{','.join(self.selectors)}{{{self.declarations}}}"


@dataclass(slots=True)
class _RuleOut:
    prelude: str
    declarations: str
    body: _Container

    def render(self) -> str:
        return f"{self.prelude}{{{self.declarations}{self.body.render()}}}"


class _Container:
    """Ordered CSS output for one level (the sheet or an at-rule body)."""

    def __init__(self) -> None:
        self._items: list[_StyleOut | _RuleOut] = []
        self._styles: dict[str, _StyleOut] = {}
        self._rules: dict[tuple[str, str], _RuleOut] = {}

    def add_style(self, selector: str, declarations: str, *, unique: bool) -> None:
        item = None if unique else self._styles.get(declarations)
        if item is None:
            item = _StyleOut(declarations)
            self._items.append(item)
            if not unique:
                self._styles[declarations] = item
        if selector not in item.selectors:
            item.selectors.append(selector)

    def add_rule(self, prelude: str, declarations: str) -> _Container:
        key = (prelude, declarations)
        item = self._rules.get(key)
        if item is None:
            item = _RuleOut(prelude, declarations, _Container())
            self._items.append(item)
            self._rules[key] = item
        return item.body

    def render(self) -> str:
        return "".join(item.render() for item in self._items)


def _compose(
    container: _Container,
    blocks: list[_Block],
    rules: list[_AtRule],
    *,
    select: Callable[[str], str],
    identifier: str,
) -> None:
    for block in blocks:
        container.add_style(
            select(block.selector), block.declarations, unique=block.is_unique
        )
    for rule in rules:
        prelude = rule.prelude.replace(NESTING_MARKER, identifier)
        body = container.add_rule(prelude, rule.declarations)
        _compose(body, rule.blocks, rule.rules, select=select, identifier=identifier)


# -----------------------------------------------------------------------------
# Public compile entrypoint
# -----------------------------------------------------------------------------


def _class_name(styles: Mapping[str, Any], digest: str) -> str:
    display_name = styles.get(DISPLAY_NAME_KEY)
    if isinstance(display_name, str) and display_name and get_settings().debug:
        return f"{display_name}_{digest}"
    return digest


def compile_styles(
    styles: Mapping[str, Any], *, is_global: bool = False
) -> CompiledRule:
    """Compile a style object into its class name and CSS text.

    Args:
        styles: Style object. A truthy `$global` key emits bare selectors
            instead of selectors scoped to the generated class.
        is_global: Compile as global styles even without a `$global` key.

    Returns:
        CompiledRule: The identifier and CSS text.

    Raises:
        TypeError: For non-mapping input, non-string keys or unsupported values.
    """
    ensure_style_object(styles)
    is_global = is_global or bool(styles.get(GLOBAL_FLAG))

    blocks: list[_Block] = []
    rules: list[_AtRule] = []
    signature = _stylize(styles, "" if is_global else NESTING_MARKER, blocks, rules)

    identifier = _class_name(styles, f"f{string_hash(signature)}")
    class_selector = f".{escape(identifier)}"

    def select(selector: str) -> str:
        if is_global:
            return selector
        return selector.replace(NESTING_MARKER, class_selector)

    sheet = _Container()
    _compose(sheet, blocks, rules, select=select, identifier=identifier)
    css_text = sheet.render()

    logger.debug("Compiled %s (%d chars of CSS)", identifier, len(css_text))
    return CompiledRule(identifier=identifier, css_text=css_text)
