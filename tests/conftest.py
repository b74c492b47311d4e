"""Shared pytest fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cssinjs import config
from cssinjs.sheet import set_default_document

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _isolate_global_state() -> Iterator[None]:
    """Reset cached settings and the default document around every test."""
    config.reset()
    set_default_document(None)
    yield
    config.reset()
    set_default_document(None)
