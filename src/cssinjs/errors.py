"""
Core error types and helpers for cssinjs.

Design intent:
- Lean on built-in exception classes for ergonomics (TypeError/RuntimeError).
- Provide machine-readable error codes via a single lightweight base error that
  can be used as an exception cause for structured handling.

Contract:
- Public raiser helpers raise built-in exceptions and chain a CssInJsError as
  the cause, carrying an ErrorCode.
- Callers that want structured handling can catch built-ins and inspect
  `exc.__cause__` for a CssInJsError (and its `code`).
- Failures raised by a caller-supplied sheet writer are never wrapped; they
  reach the caller unmodified.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final, NoReturn


class ErrorCode(StrEnum):
    """Machine-readable classification for cssinjs failures."""

    INVALID_STYLE_OBJECT = "invalid_style_object"
    INVALID_STYLE_VALUE = "invalid_style_value"
    INVALID_ANIMATION_NAME = "invalid_animation_name"
    MISSING_DOCUMENT = "missing_document"


class CssInJsError(Exception):
    """Lightweight, structured error carrying an ErrorCode.

    This is intentionally not raised directly by the core APIs. Instead, core
    helpers raise built-in exceptions (TypeError/RuntimeError) and set a
    CssInJsError as the exception cause (`raise X from CssInJsError(...)`).
    """

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        """
        Initialize CssInJsError.

        Args:
            message: Human-readable error message.
            code: Optional ErrorCode classifying the error.
        """
        super().__init__(message)
        self.code: ErrorCode | None = code


# -----------------------------------------------------------------------------
# Standardized message prefixes
# -----------------------------------------------------------------------------

_INVALID_STYLE_PREFIX: Final[str] = "CSS must be an object of key/value pairs."
_INVALID_VALUE_PREFIX: Final[str] = "Invalid CSS property value."
_INVALID_NAME_PREFIX: Final[str] = (
    "Animation name must be a string. Omit argument to auto-generate."
)
_MISSING_DOCUMENT_PREFIX: Final[str] = "No active document to insert CSS into."


# -----------------------------------------------------------------------------
# Raiser helpers (raise built-ins; chain CssInJsError with code)
# -----------------------------------------------------------------------------


def raise_invalid_style_object(
    *, got: object, detail: str | None = None
) -> NoReturn:
    """Raise a standardized style object error.

    Raises:
        TypeError: Always, chained from CssInJsError(code=INVALID_STYLE_OBJECT).
    """
    msg = f"{_INVALID_STYLE_PREFIX} Got: {type(got).__name__}."
    if detail:
        msg = f"{msg} Detail: {detail}"
    raise TypeError(msg) from CssInJsError(msg, code=ErrorCode.INVALID_STYLE_OBJECT)


def raise_invalid_style_value(*, prop: str, value: object) -> NoReturn:
    """Raise a standardized property value error.

    Raises:
        TypeError: Always, chained from CssInJsError(code=INVALID_STYLE_VALUE).
    """
    msg = (
        f"{_INVALID_VALUE_PREFIX} Property {prop!r} expects a string, number, "
        f"bool or list of those. Got: {type(value).__name__}."
    )
    raise TypeError(msg) from CssInJsError(msg, code=ErrorCode.INVALID_STYLE_VALUE)


def raise_invalid_animation_name(*, got: object) -> NoReturn:
    """Raise a standardized keyframes name error.

    Raises:
        TypeError: Always, chained from CssInJsError(code=INVALID_ANIMATION_NAME).
    """
    msg = f"{_INVALID_NAME_PREFIX} Got: {type(got).__name__}."
    raise TypeError(msg) from CssInJsError(
        msg, code=ErrorCode.INVALID_ANIMATION_NAME
    )


def raise_missing_document(*, detail: str | None = None) -> NoReturn:
    """Raise a standardized missing page context error.

    Raises:
        RuntimeError: Always, chained from CssInJsError(code=MISSING_DOCUMENT).
    """
    msg = _MISSING_DOCUMENT_PREFIX
    if detail:
        msg = f"{msg} Detail: {detail}"
    raise RuntimeError(msg) from CssInJsError(msg, code=ErrorCode.MISSING_DOCUMENT)
