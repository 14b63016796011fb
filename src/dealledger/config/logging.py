"""Logging setup for the command line and the API server."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

LOG_LEVEL_ENV: Final[str] = "DEALLEDGER_LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# libraries that log every migration step or request at INFO
NOISY_LOGGERS: Final[tuple[str, ...]] = (
    "alembic.runtime.migration",
    "sqlalchemy.engine",
    "uvicorn.access",
)


def resolve_log_level(*, verbose: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    raw = (os.getenv(LOG_LEVEL_ENV) or "").strip().upper()
    if not raw:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(raw)
    if level is None:
        raise ConfigurationError(f"{LOG_LEVEL_ENV} must be a logging level name, got {raw!r}")
    return level


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Configure the root logger once; ``force=True`` replaces existing handlers."""

    level = resolve_log_level(verbose=verbose)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if verbose else max(level, logging.WARNING))
