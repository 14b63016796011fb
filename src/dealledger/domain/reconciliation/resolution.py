"""Turn a human decision on a pending review into ledger writes. Pure."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dealledger.domain.errors import StaleReviewError, ValidationError
from dealledger.domain.model import (
    BA_OVERRIDE,
    OVERRIDE_CONFIDENCE,
    FactEvent,
    ReviewDecision,
    fact_value_from_json,
    parse_display_input,
    render_display_value,
)
from dealledger.domain.model.facts import require_text

from .detection import resolve_unit

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from dealledger.domain.model import CurrentFact, FactValue, PendingReview


@dataclass(slots=True, frozen=True)
class ResolutionPlan:
    """What applying a decision writes: at most one new event and what it supersedes."""

    decision: ReviewDecision
    new_event: FactEvent | None
    supersedes_event_id: UUID | None
    reason: str | None


def read_override_value(raw: object) -> FactValue:
    """Strings are parsed as human input; anything else must already be JSON-shaped."""

    if raw is None:
        raise ValidationError("override value is required", field="overrideValue")
    if isinstance(raw, str):
        return parse_display_input(raw)
    return fact_value_from_json(raw)


def build_override_event(
    *,
    deal_id: UUID,
    fact_key: str,
    value: object,
    display_value: str | None,
    reason: str | None,
    created_by: str | None,
    supersedes_event_id: UUID | None,
    created_at: datetime,
    unit: str | None = None,
) -> FactEvent:
    parsed = read_override_value(value)
    return FactEvent(
        deal_id=deal_id,
        fact_key=fact_key,
        value=parsed,
        display_value=(display_value or "").strip() or render_display_value(parsed),
        unit=resolve_unit(fact_key, unit),
        source=BA_OVERRIDE,
        source_confidence=OVERRIDE_CONFIDENCE,
        supersedes_event_id=supersedes_event_id,
        created_by=created_by,
        reason=require_text(reason, field_name="reason"),
        created_at=created_at,
    )


def plan_resolution(  # noqa: PLR0913
    review: PendingReview,
    decision: ReviewDecision,
    *,
    current: CurrentFact | None,
    created_at: datetime,
    resolved_by: str | None = None,
    reason: str | None = None,
    override_value: object = None,
    override_display_value: str | None = None,
) -> ResolutionPlan:
    """Plan the writes for ``decision``.

    ACCEPT_NEW appends the candidate, OVERRIDE appends a human value, both
    superseding whatever is current at the time of the decision (which may
    differ from the event the review was raised against). KEEP_EXISTING
    writes no event.
    """

    if not review.is_open:
        raise StaleReviewError(review.id)
    reason = reason.strip() if isinstance(reason, str) and reason.strip() else None
    supersedes = current.current_event_id if current is not None else None

    if decision is ReviewDecision.KEEP_EXISTING:
        return ResolutionPlan(
            decision=decision, new_event=None, supersedes_event_id=None, reason=reason
        )

    if decision is ReviewDecision.ACCEPT_NEW:
        event = FactEvent(
            deal_id=review.deal_id,
            fact_key=review.fact_key,
            value=review.new_value,
            display_value=review.new_display_value,
            unit=resolve_unit(review.fact_key, current.unit if current is not None else None),
            source=review.new_source,
            source_confidence=(
                OVERRIDE_CONFIDENCE if review.new_source == BA_OVERRIDE else review.new_confidence
            ),
            supersedes_event_id=supersedes,
            created_by=resolved_by,
            reason=reason,
            created_at=created_at,
        )
        return ResolutionPlan(
            decision=decision, new_event=event, supersedes_event_id=supersedes, reason=reason
        )

    event = build_override_event(
        deal_id=review.deal_id,
        fact_key=review.fact_key,
        value=override_value,
        display_value=override_display_value,
        reason=reason,
        created_by=resolved_by,
        supersedes_event_id=supersedes,
        created_at=created_at,
        unit=current.unit if current is not None else None,
    )
    return ResolutionPlan(
        decision=decision, new_event=event, supersedes_event_id=supersedes, reason=reason
    )
