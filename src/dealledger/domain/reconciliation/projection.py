"""Derive the current value of a fact from its event history.

The projection is a single pass over an arena of events keyed by id: every
event named by some ``supersedes_event_id`` is out, and of the remaining
CREATED events exactly one should be left. More than one means the ledger's
uniqueness invariant was violated; the most recent candidate wins (ties by
id) and the fact is reported as disputed with an ``IntegrityWarning``.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import timedelta
from typing import TYPE_CHECKING, Final

from dealledger.domain.errors import IntegrityWarning
from dealledger.domain.model import CurrentFact, DisputeDetail, FactEventType

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from uuid import UUID

    from dealledger.domain.model import FactEvent, PendingReview

log = logging.getLogger(__name__)

TIMESTAMP_STEP: Final = timedelta(microseconds=1)


def _ordering_key(event: FactEvent) -> tuple[datetime, str]:
    return event.ordering_key


def project(
    events: Iterable[FactEvent],
    *,
    pending_reviews: Iterable[PendingReview] = (),
) -> CurrentFact | None:
    """Project the events of one ``(deal_id, fact_key)`` into its current fact."""

    arena: dict[UUID, FactEvent] = {event.id: event for event in events}
    if not arena:
        return None

    scopes = {(event.deal_id, event.fact_key) for event in arena.values()}
    if len(scopes) > 1:
        raise ValueError(f"project() expects events of a single fact, got {len(scopes)}")
    deal_id, fact_key = next(iter(scopes))

    superseded_ids = {
        event.supersedes_event_id
        for event in arena.values()
        if event.supersedes_event_id is not None
    }
    candidates = sorted(
        (
            event
            for event in arena.values()
            if event.event_type is FactEventType.CREATED and event.id not in superseded_ids
        ),
        key=_ordering_key,
    )
    if not candidates:
        return None

    current = candidates[-1]
    warning: IntegrityWarning | None = None
    if len(candidates) > 1:
        warning = IntegrityWarning(
            fact_key=fact_key,
            live_event_ids=tuple(candidate.id for candidate in candidates),
            chosen_event_id=current.id,
        )
        log.warning("Ledger integrity violation for deal %s: %s", deal_id, warning.describe())

    open_reviews = sorted(
        (
            review
            for review in pending_reviews
            if review.is_open and review.deal_id == deal_id and review.fact_key == fact_key
        ),
        key=lambda review: (review.created_at, str(review.id)),
    )
    history = tuple(sorted(arena.values(), key=_ordering_key, reverse=True))

    return CurrentFact(
        deal_id=deal_id,
        fact_key=fact_key,
        category=current.category,
        current_event_id=current.id,
        current_value=current.value,
        current_display_value=current.display_value,
        current_source=current.source,
        current_confidence=current.source_confidence,
        unit=current.unit,
        is_disputed=bool(open_reviews) or warning is not None,
        first_seen_at=history[-1].created_at,
        last_updated_at=current.created_at,
        dispute_details=tuple(DisputeDetail.from_review(review) for review in open_reviews),
        integrity_warning=warning,
        event_history=history,
    )


def project_all(
    events: Iterable[FactEvent],
    *,
    pending_reviews: Iterable[PendingReview] = (),
) -> list[CurrentFact]:
    """Project every fact found in ``events``; facts without a live value are omitted."""

    events_by_fact: dict[tuple[UUID, str], list[FactEvent]] = defaultdict(list)
    for event in events:
        events_by_fact[(event.deal_id, event.fact_key)].append(event)

    reviews_by_fact: dict[tuple[UUID, str], list[PendingReview]] = defaultdict(list)
    for review in pending_reviews:
        reviews_by_fact[(review.deal_id, review.fact_key)].append(review)

    facts: list[CurrentFact] = []
    for scope in sorted(events_by_fact, key=lambda item: (item[1], str(item[0]))):
        fact = project(events_by_fact[scope], pending_reviews=reviews_by_fact.get(scope, ()))
        if fact is not None:
            facts.append(fact)
    return facts


def next_event_timestamp(events: Iterable[FactEvent], *, now: datetime) -> datetime:
    """Return ``max(now, latest + 1µs)`` so event order never depends on clock resolution."""

    latest = max((event.created_at for event in events), default=None)
    if latest is None or now > latest:
        return now
    return latest + TIMESTAMP_STEP
