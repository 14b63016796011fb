"""Ports for persisting ledger aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from dealledger.domain.model import AlertResolution, Deal, FactEvent, PendingReview

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from dealledger.domain.model import ReviewDecision


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class DealRepository(Repository[Deal], Protocol):
    def get(self, deal_id: UUID) -> Deal | None: ...


@runtime_checkable
class FactEventRepository(Repository[FactEvent], Protocol):
    """Append-only event store.

    ``add`` must surface a second live CREATED event for the same
    ``(deal_id, fact_key)`` as ``ConflictError``.
    """

    def list_for_fact(self, deal_id: UUID, fact_key: str) -> list[FactEvent]: ...

    def list_for_deal(self, deal_id: UUID) -> list[FactEvent]: ...

    def supersede(self, event: FactEvent) -> None:
        """Flip a CREATED event to SUPERSEDED; ``ConflictError`` if it already moved on."""
        ...


@runtime_checkable
class PendingReviewRepository(Repository[PendingReview], Protocol):
    def get(self, review_id: UUID) -> PendingReview | None: ...

    def list_open(self, deal_id: UUID, fact_key: str | None = None) -> list[PendingReview]: ...

    def consume(
        self,
        review: PendingReview,
        decision: ReviewDecision,
        *,
        resolved_by: str | None,
        reason: str | None,
        at: datetime,
    ) -> None:
        """Mark an OPEN review consumed; ``StaleReviewError`` if another writer got there first."""
        ...


@runtime_checkable
class AlertResolutionRepository(Repository[AlertResolution], Protocol):
    def get(self, deal_id: UUID, alert_key: str) -> AlertResolution | None: ...

    def list_for_deal(self, deal_id: UUID) -> list[AlertResolution]: ...

    def delete(self, deal_id: UUID, alert_key: str) -> bool: ...
