"""SQLAlchemy-backed unit of work for the ledger.

The adapter owns one engine per process. :func:`startup` binds it, runs the
migrations and hands out sessions; every :class:`SqlAlchemyLedgerUnitOfWork`
opens one session, exposes the ledger repositories on it and rolls back
whatever was not committed explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Self

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from dealledger.adapters.sqlalchemy.mappings import start_mappers
from dealledger.adapters.sqlalchemy.migrations import upgrade_head
from dealledger.adapters.sqlalchemy.repositories import (
    SqlAlchemyAlertResolutionRepository,
    SqlAlchemyDealRepository,
    SqlAlchemyFactEventRepository,
    SqlAlchemyPendingReviewRepository,
)
from dealledger.config import get_database_config
from dealledger.domain.errors import ConflictError
from dealledger.domain.ports.unit_of_work import LedgerRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the adapter is used before :func:`startup` or configured twice."""


@dataclass(frozen=True, slots=True)
class _Binding:
    engine: Engine
    sessions: sessionmaker[Session]


class _Registry:
    def __init__(self) -> None:
        self.binding: _Binding | None = None

    def bind(self, engine: Engine) -> None:
        self.binding = _Binding(
            engine=engine,
            sessions=sessionmaker(bind=engine, expire_on_commit=False),
        )

    def require(self) -> _Binding:
        if self.binding is None:
            raise StartupError(
                "Ledger database not initialised; call "
                "dealledger.adapters.sqlalchemy.startup() first"
            )
        return self.binding


_REGISTRY = _Registry()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> Engine:
    """Bind the adapter to an engine and migrate its schema to head."""

    if _REGISTRY.binding is not None and not force:
        raise StartupError("Ledger database already initialised; pass force=True to rebind")

    resolved = engine or create_engine(database_uri or get_database_config().uri)
    start_mappers()
    upgrade_head(engine=resolved)
    _REGISTRY.bind(resolved)
    log.info("Ledger database ready at %s", resolved.url.render_as_string(hide_password=True))
    return resolved


def configured_engine() -> Engine | None:
    return _REGISTRY.binding.engine if _REGISTRY.binding is not None else None


def is_started() -> bool:
    return _REGISTRY.binding is not None


def shutdown() -> None:
    """Dispose the bound engine; a later :func:`startup` may bind a new one."""

    if _REGISTRY.binding is not None:
        _REGISTRY.binding.engine.dispose()
    _REGISTRY.binding = None


class SqlAlchemyLedgerUnitOfWork:
    """One session with the deal, fact, review and alert repositories bound to it."""

    def __init__(self) -> None:
        self._sessions = _REGISTRY.require().sessions
        self._session: Session | None = None
        self._repositories: LedgerRepositories | None = None

    def __enter__(self) -> Self:
        if self._session is not None:
            raise StartupError("Unit of work is already in use")
        session = self._sessions()
        self._session = session
        self._repositories = LedgerRepositories(
            deals=SqlAlchemyDealRepository(session),
            fact_events=SqlAlchemyFactEventRepository(session),
            pending_reviews=SqlAlchemyPendingReviewRepository(session),
            alert_resolutions=SqlAlchemyAlertResolutionRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            # closing also discards anything flushed but never committed
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not active; use it as a context manager")
        return self._session

    @property
    def repositories(self) -> LedgerRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not active; use it as a context manager")
        return self._repositories

    def commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError("Concurrent modification detected; refetch and retry") from exc

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from dealledger.domain.ports.unit_of_work import LedgerUnitOfWork

    _uow_check: LedgerUnitOfWork = SqlAlchemyLedgerUnitOfWork()
