"""Decide whether an incoming claim may be appended or must wait for a human."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from dealledger.domain.model import (
    OVERRIDE_CONFIDENCE,
    FactEvent,
    PendingReview,
    get_fact_key_definition,
    values_equal,
)
from dealledger.domain.model.facts import utc_now
from dealledger.domain.model.values import numeric_amount

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from dealledger.domain.model import CurrentFact, FactClaim


class AcceptReason(StrEnum):
    NEW_FACT = "new_fact"
    SAME_VALUE = "same_value"
    OVERRIDE = "override"


class Significance(StrEnum):
    MINOR = "MINOR"
    SIGNIFICANT = "SIGNIFICANT"
    MAJOR = "MAJOR"


SIGNIFICANT_THRESHOLD: Final[float] = 0.15
MAJOR_THRESHOLD: Final[float] = 0.30


@dataclass(slots=True, frozen=True)
class Accept:
    reason: AcceptReason
    confidence: int
    supersedes_event_id: UUID | None = None

    def build_event(
        self,
        deal_id: UUID,
        claim: FactClaim,
        *,
        created_at: datetime,
        created_by: str | None = None,
        reason: str | None = None,
    ) -> FactEvent:
        return FactEvent(
            deal_id=deal_id,
            fact_key=claim.fact_key,
            value=claim.value,
            display_value=claim.rendered_display_value(),
            unit=resolve_unit(claim.fact_key, claim.unit),
            source=claim.source,
            source_confidence=self.confidence,
            supersedes_event_id=self.supersedes_event_id,
            created_by=created_by or claim.created_by,
            reason=reason or claim.reason,
            created_at=created_at,
        )


@dataclass(slots=True, frozen=True)
class Reject:
    review: PendingReview


type Decision = Accept | Reject


def evaluate(
    current: CurrentFact | None,
    candidate: FactClaim,
    *,
    now: datetime | None = None,
) -> Decision:
    """Accept the candidate or turn it into a pending review. Pure."""

    if candidate.is_override:
        return Accept(
            reason=AcceptReason.OVERRIDE,
            confidence=OVERRIDE_CONFIDENCE,
            supersedes_event_id=current.current_event_id if current is not None else None,
        )
    if current is None:
        return Accept(reason=AcceptReason.NEW_FACT, confidence=candidate.confidence)
    if values_equal(current.current_value, candidate.value):
        return Accept(
            reason=AcceptReason.SAME_VALUE,
            confidence=candidate.confidence,
            supersedes_event_id=current.current_event_id,
        )

    review = PendingReview(
        deal_id=current.deal_id,
        fact_key=current.fact_key,
        new_value=candidate.value,
        new_display_value=candidate.rendered_display_value(),
        new_source=candidate.source,
        new_confidence=candidate.confidence,
        existing_event_id=current.current_event_id,
        existing_value=current.current_value,
        existing_display_value=current.current_display_value,
        existing_source=current.current_source,
        existing_confidence=current.current_confidence,
        contradiction_reason=describe_contradiction(current, candidate),
        created_at=now or utc_now(),
    )
    return Reject(review=review)


def classify_difference(relative_difference: float) -> Significance:
    if relative_difference >= MAJOR_THRESHOLD:
        return Significance.MAJOR
    if relative_difference >= SIGNIFICANT_THRESHOLD:
        return Significance.SIGNIFICANT
    return Significance.MINOR


def relative_difference(existing: float, new: float) -> float:
    """Difference relative to the existing value; a zero baseline counts as 100%."""

    if existing == 0:
        return 1.0
    return abs(new - existing) / abs(existing)


def describe_contradiction(current: CurrentFact, candidate: FactClaim) -> str:
    existing_side = f"{current.current_display_value} ({current.current_source})"
    new_side = f"{candidate.rendered_display_value()} ({candidate.source})"

    existing_amount = numeric_amount(current.current_value)
    new_amount = numeric_amount(candidate.value)
    if existing_amount is not None and new_amount is not None:
        difference = relative_difference(existing_amount, new_amount)
        significance = classify_difference(difference)
        return (
            f'{significance.value} contradiction on "{current.fact_key}": '
            f"{existing_side} vs {new_side} ({difference * 100:.1f}% difference)"
        )

    if current.current_value.kind != candidate.value.kind:
        return (
            f'Contradiction on "{current.fact_key}": {existing_side} vs {new_side} '
            f"({current.current_value.kind} vs {candidate.value.kind})"
        )
    return f'Contradiction on "{current.fact_key}": {existing_side} vs {new_side}'


def resolve_unit(fact_key: str, unit: str | None) -> str | None:
    if unit:
        return unit
    definition = get_fact_key_definition(fact_key)
    return definition.unit if definition is not None else None
