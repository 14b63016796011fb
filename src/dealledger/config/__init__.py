"""Settings read from the environment (a ``.env`` file is loaded by the CLI)."""

from __future__ import annotations

from .api import ApiConfig, get_api_config
from .env import optional_env, optional_int_env, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .identity import get_default_user_id
from .logging import configure_logging
from .scoring import ScoringConfig, get_scoring_config
from .storage import DatabaseConfig, get_data_dir, get_database_config

__all__ = [
    "ApiConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "ScoringConfig",
    "configure_logging",
    "get_api_config",
    "get_data_dir",
    "get_database_config",
    "get_default_user_id",
    "get_scoring_config",
    "optional_env",
    "optional_int_env",
    "require_env_vars",
]
