from __future__ import annotations

import os

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def env_str(name: str, default: str) -> str:
    """Read a string variable; blank values fall back to the default."""

    value = (os.getenv(name) or "").strip()
    return value or default


def env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False

    raise ValueError(f"Invalid {name}; expected one of {sorted(_TRUE_VALUES | _FALSE_VALUES)}")
