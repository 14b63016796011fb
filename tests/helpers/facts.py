"""Builders for fact ledger tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from dealledger.domain.model import (
    FactClaim,
    FactEvent,
    FactEventType,
    PendingReview,
    fact_value_from_json,
)

if TYPE_CHECKING:
    from dealledger.domain.model import CurrentFact

OWNER = "analyst-1"
STRANGER = "analyst-2"
DEAL_ID = UUID("00000000-0000-0000-0000-00000000d001")
T0 = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)


def at(minutes: int) -> datetime:
    return T0 + timedelta(minutes=minutes)


def make_event(  # noqa: PLR0913
    value: object = 1_000_000,
    *,
    fact_key: str = "financial.arr",
    source: str = "PITCH_DECK",
    confidence: int = 70,
    created_at: datetime = T0,
    supersedes: FactEvent | None = None,
    event_type: FactEventType = FactEventType.CREATED,
    deal_id: UUID = DEAL_ID,
    event_id: UUID | None = None,
    reason: str | None = None,
) -> FactEvent:
    return FactEvent(
        id=event_id or uuid4(),
        deal_id=deal_id,
        fact_key=fact_key,
        value=fact_value_from_json(value),
        source=source,
        source_confidence=confidence,
        event_type=event_type,
        supersedes_event_id=supersedes.id if supersedes is not None else None,
        reason=reason,
        created_at=created_at,
    )


def make_claim(
    value: object = 1_000_000,
    *,
    fact_key: str = "financial.arr",
    source: str = "PITCH_DECK",
    confidence: int = 70,
    display_value: str | None = None,
    reason: str | None = None,
) -> FactClaim:
    return FactClaim(
        fact_key=fact_key,
        value=fact_value_from_json(value),
        source=source,
        confidence=confidence,
        display_value=display_value,
        reason=reason,
    )


def make_review(
    current: CurrentFact,
    value: object = 1_200_000,
    *,
    source: str = "FINANCIAL_MODEL",
    confidence: int = 85,
    created_at: datetime = T0,
) -> PendingReview:
    return PendingReview(
        deal_id=current.deal_id,
        fact_key=current.fact_key,
        new_value=fact_value_from_json(value),
        new_source=source,
        new_confidence=confidence,
        existing_event_id=current.current_event_id,
        existing_value=current.current_value,
        existing_display_value=current.current_display_value,
        existing_source=current.current_source,
        existing_confidence=current.current_confidence,
        contradiction_reason="values differ",
        created_at=created_at,
    )
