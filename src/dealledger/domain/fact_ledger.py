"""Application services for the fact ledger.

Every mutating operation runs in one unit of work: read the fact's events and
open reviews, decide in the pure reconciliation layer, then write the new
event, the supersession and any review state change together.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from dealledger.domain.deals import require_owned_deal, require_user
from dealledger.domain.errors import NotFoundError, StaleReviewError, ValidationError
from dealledger.domain.model import (
    FactCategory,
    FactEvent,
    FactEventType,
    ReviewDecision,
    utc_now,
    values_equal,
)
from dealledger.domain.model.facts import require_text, validate_fact_key
from dealledger.domain.reconciliation import (
    Accept,
    FactSummary,
    build_override_event,
    evaluate,
    next_event_timestamp,
    plan_resolution,
    project,
    project_all,
    summarize_facts,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from dealledger.domain.model import CurrentFact, FactClaim, PendingReview
    from dealledger.domain.ports import LedgerUnitOfWork, LedgerUnitOfWorkFactory

log = logging.getLogger(__name__)


class ClaimStatus(StrEnum):
    ACCEPTED = "accepted"
    QUEUED = "queued"
    ALREADY_QUEUED = "already_queued"


@dataclass(slots=True, frozen=True)
class ClaimOutcome:
    fact_key: str
    status: ClaimStatus
    event_id: UUID | None = None
    review_id: UUID | None = None


@dataclass(slots=True)
class ClaimBatchResult:
    """Outcome of recording a batch of agent claims."""

    outcomes: list[ClaimOutcome] = field(default_factory=list[ClaimOutcome])

    @property
    def accepted(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is ClaimStatus.ACCEPTED)

    @property
    def queued(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is ClaimStatus.QUEUED)

    @property
    def already_queued(self) -> int:
        return sum(
            1 for outcome in self.outcomes if outcome.status is ClaimStatus.ALREADY_QUEUED
        )


def parse_category(raw: str | None) -> FactCategory | None:
    if raw is None or not raw.strip():
        return None
    try:
        return FactCategory(raw.strip().upper())
    except ValueError:
        raise ValidationError(f"unknown category: {raw!r}", field="category") from None


# reads


def get_current_facts(
    *,
    deal_id: UUID,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
    category: FactCategory | None = None,
) -> list[CurrentFact]:
    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, require_user(user_id))
        events = uow.repositories.fact_events.list_for_deal(deal_id)
        reviews = uow.repositories.pending_reviews.list_open(deal_id)
    facts = project_all(events, pending_reviews=reviews)
    if category is not None:
        facts = [fact for fact in facts if fact.category is category]
    return facts


def get_current_fact(
    *,
    deal_id: UUID,
    fact_key: str,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> CurrentFact | None:
    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, require_user(user_id))
        return _project_fact(uow, deal_id, validate_fact_key(fact_key))


def get_fact_summary(
    *,
    deal_id: UUID,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> FactSummary:
    facts = get_current_facts(
        deal_id=deal_id, user_id=user_id, unit_of_work_factory=unit_of_work_factory
    )
    return summarize_facts(facts)


def list_pending_reviews(
    *,
    deal_id: UUID,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> list[PendingReview]:
    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, require_user(user_id))
        return uow.repositories.pending_reviews.list_open(deal_id)


# writes


def record_fact_claim(
    *,
    deal_id: UUID,
    claim: FactClaim,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> ClaimOutcome:
    """Append the claim or queue it for review when it contradicts the current value."""

    result = record_fact_claims(
        deal_id=deal_id,
        claims=(claim,),
        user_id=user_id,
        unit_of_work_factory=unit_of_work_factory,
    )
    return result.outcomes[0]


def record_fact_claims(
    *,
    deal_id: UUID,
    claims: Iterable[FactClaim],
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> ClaimBatchResult:
    """Record claims in order; each claim sees the outcome of the ones before it."""

    claims = list(claims)
    result = ClaimBatchResult()
    if not claims:
        return result

    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, require_user(user_id))
        for claim in claims:
            result.outcomes.append(_record_claim(uow, deal_id, claim))
        uow.commit()

    log.info(
        "Recorded %s claim(s) for deal %s: accepted=%s, queued=%s, already_queued=%s",
        len(claims),
        deal_id,
        result.accepted,
        result.queued,
        result.already_queued,
    )
    return result


def override_fact(  # noqa: PLR0913
    *,
    deal_id: UUID,
    fact_key: str,
    value: object,
    reason: str,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
    display_value: str | None = None,
) -> FactEvent:
    """Replace the current value with a human value. Open reviews of the key stay open."""

    fact_key = validate_fact_key(fact_key)
    reason = require_text(reason, field_name="reason")
    user_id = require_user(user_id)

    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, user_id)
        events = uow.repositories.fact_events.list_for_fact(deal_id, fact_key)
        current = project(events)
        event = build_override_event(
            deal_id=deal_id,
            fact_key=fact_key,
            value=value,
            display_value=display_value,
            reason=reason,
            created_by=user_id,
            supersedes_event_id=current.current_event_id if current is not None else None,
            created_at=next_event_timestamp(events, now=utc_now()),
            unit=current.unit if current is not None else None,
        )
        _append(uow, events, event)
        uow.commit()

    log.info(
        "Override on deal %s: %s = %s by %s", deal_id, fact_key, event.display_value, user_id
    )
    return event


def delete_fact(
    *,
    deal_id: UUID,
    fact_key: str,
    reason: str,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> FactEvent:
    """Tombstone the current value; a later claim starts a fresh chain."""

    fact_key = validate_fact_key(fact_key)
    reason = require_text(reason, field_name="reason")
    user_id = require_user(user_id)

    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, user_id)
        events = uow.repositories.fact_events.list_for_fact(deal_id, fact_key)
        current = project(events)
        if current is None:
            raise NotFoundError(f"Fact {fact_key!r} has no current value on deal {deal_id}")
        tombstone = FactEvent(
            deal_id=deal_id,
            fact_key=fact_key,
            value=current.current_value,
            display_value=current.current_display_value,
            unit=current.unit,
            source=current.current_source,
            source_confidence=current.current_confidence,
            event_type=FactEventType.DELETED,
            supersedes_event_id=current.current_event_id,
            created_by=user_id,
            reason=reason,
            created_at=next_event_timestamp(events, now=utc_now()),
        )
        _append(uow, events, tombstone)
        uow.commit()

    log.info("Deleted fact %s on deal %s by %s", fact_key, deal_id, user_id)
    return tombstone


def resolve_pending_review(  # noqa: PLR0913
    *,
    deal_id: UUID,
    review_id: UUID,
    decision: ReviewDecision,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
    reason: str | None = None,
    override_value: object = None,
    override_display_value: str | None = None,
) -> FactEvent | None:
    """Apply a human decision to an open review.

    Returns the event that is current afterwards: the appended event for
    ACCEPT_NEW and OVERRIDE, the unchanged current event for KEEP_EXISTING
    (``None`` if the fact has no current value any more).
    """

    user_id = require_user(user_id)
    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, user_id)
        reviews = uow.repositories.pending_reviews
        review = reviews.get(review_id)
        if review is None or review.deal_id != deal_id:
            raise NotFoundError(f"Review {review_id} not found")
        if not review.is_open:
            raise StaleReviewError(review.id)

        events = uow.repositories.fact_events.list_for_fact(deal_id, review.fact_key)
        current = project(events)
        now = utc_now()
        plan = plan_resolution(
            review,
            decision,
            current=current,
            created_at=next_event_timestamp(events, now=now),
            resolved_by=user_id,
            reason=reason,
            override_value=override_value,
            override_display_value=override_display_value,
        )
        reviews.consume(review, decision, resolved_by=user_id, reason=plan.reason, at=now)
        if plan.new_event is not None:
            _append(uow, events, plan.new_event)
        uow.commit()

    log.info(
        "Resolved review %s on deal %s (%s) with %s by %s",
        review_id,
        deal_id,
        review.fact_key,
        decision.value,
        user_id,
    )
    if plan.new_event is not None:
        return plan.new_event
    return _find(events, current.current_event_id) if current is not None else None


# helpers


def _project_fact(uow: LedgerUnitOfWork, deal_id: UUID, fact_key: str) -> CurrentFact | None:
    events = uow.repositories.fact_events.list_for_fact(deal_id, fact_key)
    reviews = uow.repositories.pending_reviews.list_open(deal_id, fact_key)
    return project(events, pending_reviews=reviews)


def _find(events: Sequence[FactEvent], event_id: UUID) -> FactEvent:
    for event in events:
        if event.id == event_id:
            return event
    raise NotFoundError(f"Event {event_id} not found")


def _append(uow: LedgerUnitOfWork, events: Sequence[FactEvent], event: FactEvent) -> None:
    repository = uow.repositories.fact_events
    if event.supersedes_event_id is not None:
        repository.supersede(_find(events, event.supersedes_event_id))
    repository.add(event)


def _record_claim(uow: LedgerUnitOfWork, deal_id: UUID, claim: FactClaim) -> ClaimOutcome:
    events = uow.repositories.fact_events.list_for_fact(deal_id, claim.fact_key)
    open_reviews = uow.repositories.pending_reviews.list_open(deal_id, claim.fact_key)
    current = project(events, pending_reviews=open_reviews)
    now = utc_now()

    decision = evaluate(current, claim, now=now)
    if isinstance(decision, Accept):
        event = decision.build_event(
            deal_id, claim, created_at=next_event_timestamp(events, now=now)
        )
        _append(uow, events, event)
        log.debug(
            "Accepted %s = %s from %s (%s)",
            claim.fact_key,
            event.display_value,
            claim.source,
            decision.reason.value,
        )
        return ClaimOutcome(
            fact_key=claim.fact_key, status=ClaimStatus.ACCEPTED, event_id=event.id
        )

    for review in open_reviews:
        if values_equal(review.new_value, claim.value):
            return ClaimOutcome(
                fact_key=claim.fact_key, status=ClaimStatus.ALREADY_QUEUED, review_id=review.id
            )

    uow.repositories.pending_reviews.add(decision.review)
    log.info("Queued review %s: %s", decision.review.id, decision.review.contradiction_reason)
    return ClaimOutcome(
        fact_key=claim.fact_key, status=ClaimStatus.QUEUED, review_id=decision.review.id
    )
