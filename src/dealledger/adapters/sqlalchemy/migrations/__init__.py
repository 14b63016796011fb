"""Schema migrations bundled with the SQLAlchemy adapter.

The scripts live next to this module so an installed package can migrate
without a source checkout. ``[tool.alembic]`` in pyproject.toml points the
``alembic`` command line at the same directory for authoring revisions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from dealledger.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent

log = logging.getLogger(__name__)


def alembic_config(*, database_uri: str | None = None) -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    config.set_main_option("path_separator", "os")
    if database_uri is not None:
        config.set_main_option("sqlalchemy.url", database_uri)
    return config


def head_revision() -> str | None:
    return ScriptDirectory.from_config(alembic_config()).get_current_head()


def current_revision(engine: Engine) -> str | None:
    """Return the revision the database is stamped with, if any."""

    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Upgrade the database schema to the latest revision.

    With an engine the upgrade runs on one of its connections, which keeps
    in-memory SQLite databases intact; otherwise Alembic connects to the URI.
    """

    if engine is not None:
        config = alembic_config()
        with engine.begin() as connection:
            config.attributes["connection"] = connection
            command.upgrade(config, "head")
    else:
        uri = database_uri or get_database_config().uri
        command.upgrade(alembic_config(database_uri=uri), "head")
    log.debug("Schema upgraded to %s", head_revision())
