"""Where the ledger database lives."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env

DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DATA_DIR_ENV: Final[str] = "DEALLEDGER_DATA_DIR"
DEFAULT_DB_FILENAME: Final[str] = "dealledger.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def default_data_dir() -> Path:
    xdg_data_home = optional_env("XDG_DATA_HOME")
    base = Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"
    return base / "dealledger"


def get_data_dir(*, create: bool = True) -> Path:
    configured = optional_env(DATA_DIR_ENV)
    data_dir = (Path(configured) if configured else default_data_dir()).expanduser().resolve()
    if create:
        data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_database_config() -> DatabaseConfig:
    """``DATABASE_URI`` if set, else a SQLite file in the data directory."""

    uri = optional_env(DATABASE_URI_ENV)
    if uri is None:
        uri = f"sqlite+pysqlite:///{get_data_dir() / DEFAULT_DB_FILENAME}"
    return DatabaseConfig(uri=uri)
