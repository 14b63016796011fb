"""Alembic environment for the ledger schema.

``upgrade_head`` either hands over an open connection through
``config.attributes["connection"]`` or sets ``sqlalchemy.url``; both paths
share the same context options.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from alembic import context
from sqlalchemy import create_engine, pool

from dealledger.adapters.sqlalchemy.mappings import mapper_registry, start_mappers
from dealledger.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

log = logging.getLogger("dealledger.migrations")

config = context.config
start_mappers()

# batch mode lets SQLite alter tables by copy-and-move
CONTEXT_OPTIONS: dict[str, Any] = {
    "target_metadata": mapper_registry.metadata,
    "render_as_batch": True,
    "compare_type": True,
}


def _run(connection: Connection) -> None:
    context.configure(connection=connection, **CONTEXT_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def migrate_offline() -> None:
    url = config.get_main_option("sqlalchemy.url") or get_database_config().uri
    log.info("Rendering ledger migrations as SQL")
    context.configure(url=url, literal_binds=True, **CONTEXT_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def migrate_online() -> None:
    connection: Connection | None = config.attributes.get("connection")
    if connection is not None:
        _run(connection)
        return

    url = config.get_main_option("sqlalchemy.url") or get_database_config().uri
    engine = create_engine(url, poolclass=pool.NullPool)
    try:
        with engine.connect() as owned:
            _run(owned)
    finally:
        engine.dispose()


if context.is_offline_mode():
    migrate_offline()
else:
    migrate_online()
