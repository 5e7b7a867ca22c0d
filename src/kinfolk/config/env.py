"""Environment variable loaders for configuration."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values


def _optional_env(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def positive_int_env(name: str, default: int) -> int:
    """Read an optional positive integer from the environment."""

    raw = _optional_env(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", setting=name) from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}", setting=name)
    return value


def bool_env(name: str, *, default: bool = False) -> bool:
    raw = _optional_env(name)
    if raw is None:
        return default
    token = raw.lower()
    if token in TRUE_VALUES:
        return True
    if token in FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}", setting=name)


def log_level_env(name: str, default: int) -> int:
    """Read a logging level given by name (``DEBUG``) or number (``10``)."""

    raw = _optional_env(name)
    if raw is None:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        raise ConfigurationError(f"{name} is not a logging level: {raw!r}", setting=name)
    return level
