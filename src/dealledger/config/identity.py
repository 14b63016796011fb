"""Caller identity for command-line use."""

from __future__ import annotations

from typing import Final

from .env import require_env_vars

USER_ID_ENV: Final[str] = "DEALLEDGER_USER_ID"


def get_default_user_id() -> str:
    """Return the acting user for CLI commands run without ``--user``."""

    return require_env_vars((USER_ID_ENV,))[USER_ID_ENV]
