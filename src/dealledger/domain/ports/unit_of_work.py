"""Transaction boundary the ledger services run in."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Self

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from dealledger.domain.ports.persistence import (
        AlertResolutionRepository,
        DealRepository,
        FactEventRepository,
        PendingReviewRepository,
    )


@dataclass(slots=True)
class LedgerRepositories:
    """Repositories bound to one transaction."""

    deals: DealRepository
    fact_events: FactEventRepository
    pending_reviews: PendingReviewRepository
    alert_resolutions: AlertResolutionRepository


class LedgerUnitOfWork(Protocol):
    """Context manager around one transaction.

    Nothing is persisted unless ``commit`` is called before the block exits;
    an exception inside the block rolls the transaction back.
    """

    @property
    def repositories(self) -> LedgerRepositories: ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


type LedgerUnitOfWorkFactory = Callable[[], LedgerUnitOfWork]
