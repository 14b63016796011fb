"""Readers for ``DEALLEDGER_*`` and related environment variables."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable


def optional_env(name: str) -> str | None:
    """Stripped value of a variable; blank counts as unset."""

    raw = os.getenv(name)
    if raw is None:
        return None
    return raw.strip() or None


def require_env_vars(names: Iterable[str]) -> dict[str, str]:
    """Read every variable, reporting all missing ones in a single error."""

    values = {name: optional_env(name) for name in names}
    missing = sorted(name for name, value in values.items() if value is None)
    if missing:
        raise MissingConfigurationError(f"Missing configuration for: {', '.join(missing)}")
    return {name: value for name, value in values.items() if value is not None}


def optional_int_env(name: str, *, minimum: int | None = None) -> int | None:
    raw = optional_env(name)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value
