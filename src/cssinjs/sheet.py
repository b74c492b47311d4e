"""
cssinjs.sheet.

Page-level style sheets and at-most-once rule insertion.

Model
-----
- `StyleSheet`: an append-only, order-preserving buffer standing in for the
  page's `<style>` element.
- `InsertionGate`: remembers which rules were written and suppresses
  duplicate writes. The remembered set only grows.
- `Document`: one page context, a sheet plus the gate that writes to it, and
  the compile cache `css()` uses while the document is active.

The document that `css()` and friends write to is looked up per execution
context (`contextvars`), so concurrent requests rendering different pages never
share a sheet. Hosts with a single page can install a process-wide default
instead. With neither, insertion fails loudly.
"""

from __future__ import annotations

import html
import logging
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

from .errors import raise_missing_document
from .memo import ReferenceCache

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from .compile import CompiledRule

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Sheet
# -----------------------------------------------------------------------------


class StyleSheet:
    """Append-only CSS buffer for one page."""

    def __init__(self) -> None:
        self._rules: list[str] = []

    def insert(self, css_text: str) -> None:
        """Append CSS text to the end of the sheet."""
        self._rules.append(css_text)

    @property
    def rules(self) -> tuple[str, ...]:
        """Inserted CSS texts, in insertion order."""
        return tuple(self._rules)

    @property
    def css_text(self) -> str:
        """The whole sheet as one CSS string."""
        return "".join(self._rules)

    def render(self, *, nonce: str | None = None) -> str:
        """Render the sheet as a `<style>` element.

        Args:
            nonce: Optional CSP nonce for the element.

        Returns:
            The element markup, or an empty string for an empty sheet.
        """
        if not self._rules:
            return ""
        attrs = f' nonce="{html.escape(nonce, quote=True)}"' if nonce else ""
        # A literal `</style>` inside a value would close the element early.
        body = self.css_text.replace("</", "<\\/")
        return f"<style{attrs}>{body}</style>"

    def __len__(self) -> int:
        return len(self._rules)


# -----------------------------------------------------------------------------
# Insertion gate
# -----------------------------------------------------------------------------


class InsertionGate:
    """Write each compiled rule to a sheet at most once.

    A rule is keyed by its identifier and CSS text together: global and scoped
    compiles of the same structure share an identifier but not their CSS.

    The check, the write and the bookkeeping happen under one lock, so the
    at-most-once guarantee holds on multi-threaded hosts too.
    """

    def __init__(self, write: Callable[[str], None]) -> None:
        """
        Initialize InsertionGate.

        Args:
            write: Sheet-write capability. Whatever it raises propagates.
        """
        self._write = write
        self._inserted: set[tuple[str, str]] = set()
        self._identifiers: set[str] = set()
        self._lock = threading.Lock()

    def insert(self, rule: Iterable[str]) -> str:
        """Insert a compiled rule unless the same rule was inserted before.

        Args:
            rule: `CompiledRule` or `(identifier, css_text)` pair.

        Returns:
            The identifier, whether or not anything was written.
        """
        identifier, css_text = rule
        key = (identifier, css_text)
        with self._lock:
            if key in self._inserted:
                logger.debug("Skipping %s: already inserted", identifier)
                return identifier
            # Only record after a successful write so a retry can try again.
            self._write(css_text)
            self._inserted.add(key)
            self._identifiers.add(identifier)
        logger.debug("Inserted %s", identifier)
        return identifier

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._identifiers
        return tuple(item) in self._inserted  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._inserted)


# -----------------------------------------------------------------------------
# Documents
# -----------------------------------------------------------------------------


class Document:
    """A page context: a style sheet, the gate guarding it, and a memo cache.

    `css()` memoizes compiles in the active document's `memo_cache`, so cache
    entries for plain `dict` style objects live only as long as the document.
    """

    def __init__(
        self,
        sheet: StyleSheet | None = None,
        *,
        memo_cache: ReferenceCache[CompiledRule] | None = None,
    ) -> None:
        """
        Initialize Document.

        Args:
            sheet: Sheet to write to; a fresh one is created when omitted.
            memo_cache: Compile cache, e.g. one shared by every request for a
                set of long-lived style objects. Private to the document when
                omitted.
        """
        self.sheet = StyleSheet() if sheet is None else sheet
        self.gate = InsertionGate(self.sheet.insert)
        self.memo_cache: ReferenceCache[CompiledRule] = (
            ReferenceCache() if memo_cache is None else memo_cache
        )

    def insert(self, rule: Iterable[str]) -> str:
        """Insert a compiled rule into this document's sheet at most once."""
        return self.gate.insert(rule)


_ACTIVE_DOCUMENT: ContextVar[Document | None] = ContextVar(
    "cssinjs_active_document", default=None
)
_DEFAULT_DOCUMENT: Document | None = None


@contextmanager
def use_document(document: Document | None = None) -> Iterator[Document]:
    """Activate a document for the current context.

    Args:
        document: Document to activate; a fresh one is created when omitted.

    Yields:
        The active document.
    """
    doc = Document() if document is None else document
    token = _ACTIVE_DOCUMENT.set(doc)
    try:
        yield doc
    finally:
        _ACTIVE_DOCUMENT.reset(token)


def set_default_document(document: Document | None) -> None:
    """Install (or, with None, remove) the process-wide fallback document."""
    global _DEFAULT_DOCUMENT  # noqa: PLW0603
    _DEFAULT_DOCUMENT = document


def current_document() -> Document:
    """Return the document CSS is inserted into.

    Returns:
        The context's document, else the process-wide default.

    Raises:
        RuntimeError: If no document is available.
    """
    doc = _ACTIVE_DOCUMENT.get()
    if doc is None:
        doc = _DEFAULT_DOCUMENT
    if doc is None:
        raise_missing_document(
            detail="wrap rendering in cssinjs.use_document() or call "
            "cssinjs.set_default_document()"
        )
    return doc


def insert_rule(rule: Iterable[str]) -> str:
    """Insert a compiled rule into the current document at most once."""
    return current_document().insert(rule)
