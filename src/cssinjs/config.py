"""
cssinjs.config.

Environment-driven settings for cssinjs.

Variables
---------
- `CSSINJS_DEBUG`: truthy values (`1`, `true`, `yes`, `on`) enable debug mode.
  In debug mode a string `$displayName` on a style object prefixes its class
  name (`Button_f6e2hlp`) to make generated CSS readable while developing.

Settings are read once and cached; call `reset()` after changing the
environment (tests do this through monkeypatch).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Final

logger = logging.getLogger(__name__)

DEBUG_ENV_VAR: Final[str] = "CSSINJS_DEBUG"

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings for cssinjs.

    Attributes:
        debug: Honor `$displayName` when generating class names.
    """

    debug: bool = False


_SETTINGS: Settings | None = None


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def get_settings() -> Settings:
    """Load and cache settings from the environment.

    Returns:
        Settings: The cached settings instance.
    """
    global _SETTINGS  # noqa: PLW0603
    if _SETTINGS is None:
        _SETTINGS = Settings(debug=_env_flag(DEBUG_ENV_VAR))
        logger.debug("Loaded cssinjs settings: %s", _SETTINGS)
    return _SETTINGS


def reset() -> None:
    """Reset cached settings. For testing."""
    global _SETTINGS  # noqa: PLW0603
    _SETTINGS = None
