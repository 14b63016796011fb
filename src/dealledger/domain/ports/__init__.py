"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    AlertResolutionRepository,
    DealRepository,
    FactEventRepository,
    PendingReviewRepository,
    Repository,
)
from .unit_of_work import (
    LedgerRepositories,
    LedgerUnitOfWork,
    LedgerUnitOfWorkFactory,
)

__all__ = [
    "AlertResolutionRepository",
    "DealRepository",
    "FactEventRepository",
    "LedgerRepositories",
    "LedgerUnitOfWork",
    "LedgerUnitOfWorkFactory",
    "PendingReviewRepository",
    "Repository",
]
