"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.attributes import set_committed_value

from dealledger.adapters.sqlalchemy.mappings import (
    alert_resolution_table,
    fact_event_table,
    pending_review_table,
)
from dealledger.domain.errors import ConflictError, StaleReviewError
from dealledger.domain.model import (
    AlertResolution,
    Deal,
    FactEvent,
    FactEventType,
    PendingReview,
    ReviewStatus,
)

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from dealledger.domain.model import ReviewDecision

log = logging.getLogger(__name__)


def _rowcount(result: object) -> int:
    return cast("CursorResult[Any]", result).rowcount


class SqlAlchemyDealRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Deal) -> None:
        self.session.add(entity)

    def get(self, deal_id: UUID) -> Deal | None:
        return self.session.get(Deal, deal_id)


class SqlAlchemyFactEventRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: FactEvent) -> None:
        self.session.add(entity)
        try:
            self.session.flush()
        except IntegrityError as exc:
            log.warning(
                "Rejected second live event for %s on deal %s", entity.fact_key, entity.deal_id
            )
            raise ConflictError(
                f"Fact {entity.fact_key!r} on deal {entity.deal_id} was modified concurrently; "
                "refetch and retry"
            ) from exc

    def list_for_fact(self, deal_id: UUID, fact_key: str) -> list[FactEvent]:
        stmt = (
            select(FactEvent)
            .where(fact_event_table.c.deal_id == deal_id)
            .where(fact_event_table.c.fact_key == fact_key)
            .order_by(fact_event_table.c.created_at, fact_event_table.c.id)
        )
        return list(self.session.scalars(stmt))

    def list_for_deal(self, deal_id: UUID) -> list[FactEvent]:
        stmt = (
            select(FactEvent)
            .where(fact_event_table.c.deal_id == deal_id)
            .order_by(
                fact_event_table.c.fact_key,
                fact_event_table.c.created_at,
                fact_event_table.c.id,
            )
        )
        return list(self.session.scalars(stmt))

    def supersede(self, event: FactEvent) -> None:
        stmt = (
            update(fact_event_table)
            .where(fact_event_table.c.id == event.id)
            .where(fact_event_table.c.event_type == FactEventType.CREATED)
            .values(event_type=FactEventType.SUPERSEDED)
        )
        if _rowcount(self.session.execute(stmt)) != 1:
            log.warning("Event %s for %s was already superseded", event.id, event.fact_key)
            raise ConflictError(
                f"Fact {event.fact_key!r} on deal {event.deal_id} changed since it was read; "
                "refetch and retry"
            )
        set_committed_value(event, "event_type", FactEventType.SUPERSEDED)


class SqlAlchemyPendingReviewRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: PendingReview) -> None:
        self.session.add(entity)

    def get(self, review_id: UUID) -> PendingReview | None:
        return self.session.get(PendingReview, review_id)

    def list_open(self, deal_id: UUID, fact_key: str | None = None) -> list[PendingReview]:
        stmt = (
            select(PendingReview)
            .where(pending_review_table.c.deal_id == deal_id)
            .where(pending_review_table.c.status == ReviewStatus.OPEN)
        )
        if fact_key is not None:
            stmt = stmt.where(pending_review_table.c.fact_key == fact_key)
        stmt = stmt.order_by(pending_review_table.c.created_at, pending_review_table.c.id)
        return list(self.session.scalars(stmt))

    def consume(
        self,
        review: PendingReview,
        decision: ReviewDecision,
        *,
        resolved_by: str | None,
        reason: str | None,
        at: datetime,
    ) -> None:
        values: dict[str, Any] = {
            "status": ReviewStatus.CONSUMED,
            "decision": decision,
            "resolved_at": at,
            "resolved_by": resolved_by,
            "resolution_reason": reason,
        }
        stmt = (
            update(pending_review_table)
            .where(pending_review_table.c.id == review.id)
            .where(pending_review_table.c.status == ReviewStatus.OPEN)
            .values(**values)
        )
        if _rowcount(self.session.execute(stmt)) != 1:
            raise StaleReviewError(review.id)
        for key, value in values.items():
            set_committed_value(review, key, value)


class SqlAlchemyAlertResolutionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: AlertResolution) -> None:
        self.session.add(entity)
        try:
            self.session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                f"Alert {entity.alert_key!r} on deal {entity.deal_id} was resolved concurrently"
            ) from exc

    def get(self, deal_id: UUID, alert_key: str) -> AlertResolution | None:
        stmt = (
            select(AlertResolution)
            .where(alert_resolution_table.c.deal_id == deal_id)
            .where(alert_resolution_table.c.alert_key == alert_key)
        )
        return self.session.scalars(stmt).one_or_none()

    def list_for_deal(self, deal_id: UUID) -> list[AlertResolution]:
        stmt = (
            select(AlertResolution)
            .where(alert_resolution_table.c.deal_id == deal_id)
            .order_by(alert_resolution_table.c.created_at, alert_resolution_table.c.alert_key)
        )
        return list(self.session.scalars(stmt))

    def delete(self, deal_id: UUID, alert_key: str) -> bool:
        resolution = self.get(deal_id, alert_key)
        if resolution is None:
            return False
        self.session.delete(resolution)
        self.session.flush()
        return True
