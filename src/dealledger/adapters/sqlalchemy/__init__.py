"""SQLAlchemy adapter package for the ledger."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyAlertResolutionRepository,
    SqlAlchemyDealRepository,
    SqlAlchemyFactEventRepository,
    SqlAlchemyPendingReviewRepository,
)
from .unit_of_work import (
    SqlAlchemyLedgerUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyAlertResolutionRepository",
    "SqlAlchemyDealRepository",
    "SqlAlchemyFactEventRepository",
    "SqlAlchemyLedgerUnitOfWork",
    "SqlAlchemyPendingReviewRepository",
    "StartupError",
    "configured_engine",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
