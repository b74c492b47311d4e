"""cssinjs.

Deterministic CSS-in-JS style compilation with at-most-once insertion.

Public API (v1)
--------------
Primary user entrypoints:
- `css`: Insert namespaced styles and return the generated class name.
- `global_css`: Insert global styles.
- `keyframes`: Insert a keyframes block and return the animation name.

Compile without inserting:
- `make_css`, `make_global`, `make_keyframes` (`make_keyframes_auto`,
  `make_keyframes_named`).

Page context:
- `use_document`, `set_default_document`, `current_document`, `Document`,
  `StyleSheet`, `InsertionGate`.

Design guarantees:
- Structurally equal style objects compile to the same class name and CSS,
  whatever their identity or key order.
- A rule is written to a document's sheet at most once.
"""

from __future__ import annotations

from .api import (
    css,
    global_css,
    keyframes,
    make_css,
    make_global,
    make_keyframes,
    make_keyframes_auto,
    make_keyframes_named,
)
from .compile import CompiledRule, compile_styles, string_hash
from .config import Settings, get_settings
from .errors import CssInJsError, ErrorCode
from .memo import ReferenceCache, StyleDict, memo
from .sheet import (
    Document,
    InsertionGate,
    StyleSheet,
    current_document,
    insert_rule,
    set_default_document,
    use_document,
)

# -----------------------------------------------------------------------------
# Versioning
# -----------------------------------------------------------------------------

__version__ = "0.1.0"

# -----------------------------------------------------------------------------
# Public export surface
# -----------------------------------------------------------------------------

__all__ = [
    "CompiledRule",
    "CssInJsError",
    "Document",
    "ErrorCode",
    "InsertionGate",
    "ReferenceCache",
    "Settings",
    "StyleDict",
    "StyleSheet",
    "__version__",
    "compile_styles",
    "css",
    "current_document",
    "get_settings",
    "global_css",
    "insert_rule",
    "keyframes",
    "make_css",
    "make_global",
    "make_keyframes",
    "make_keyframes_auto",
    "make_keyframes_named",
    "memo",
    "set_default_document",
    "string_hash",
    "use_document",
]
