"""HTTP server configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env, optional_int_env

DEFAULT_API_HOST: Final[str] = "127.0.0.1"
DEFAULT_API_PORT: Final[int] = 8000


@dataclass(frozen=True, slots=True)
class ApiConfig:
    host: str = DEFAULT_API_HOST
    port: int = DEFAULT_API_PORT


def get_api_config() -> ApiConfig:
    host = optional_env("DEALLEDGER_API_HOST") or DEFAULT_API_HOST
    port = optional_int_env("DEALLEDGER_API_PORT", minimum=1)
    return ApiConfig(host=host, port=port if port is not None else DEFAULT_API_PORT)
