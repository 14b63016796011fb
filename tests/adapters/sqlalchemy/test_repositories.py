from __future__ import annotations

from datetime import UTC
from typing import TYPE_CHECKING

import pytest

from dealledger.domain.errors import ConflictError, StaleReviewError
from dealledger.domain.model import (
    FactEventType,
    MapValue,
    ReviewDecision,
    ReviewStatus,
    TextListValue,
)
from dealledger.domain.reconciliation import project
from tests.helpers.alerts import make_resolution
from tests.helpers.facts import at, make_event, make_review

if TYPE_CHECKING:
    from collections.abc import Callable

    from dealledger.adapters.sqlalchemy import SqlAlchemyLedgerUnitOfWork
    from dealledger.domain.model import Deal

    type Factory = Callable[[], SqlAlchemyLedgerUnitOfWork]


def test_values_and_timestamps_round_trip(ledger_unit_of_work: Factory, deal: Deal) -> None:
    structured = make_event(
        {"amount": 2_500_000, "currency": "EUR"}, fact_key="financial.last_round", deal_id=deal.id
    )
    listed = make_event(["Alice", "Bob"], fact_key="team.advisors", deal_id=deal.id)
    with ledger_unit_of_work() as uow:
        uow.repositories.fact_events.add(structured)
        uow.repositories.fact_events.add(listed)
        uow.commit()

    with ledger_unit_of_work() as uow:
        events = {e.fact_key: e for e in uow.repositories.fact_events.list_for_deal(deal.id)}

    assert events["financial.last_round"].value == MapValue({"amount": 2_500_000, "currency": "EUR"})
    assert events["team.advisors"].value == TextListValue(("Alice", "Bob"))
    assert events["team.advisors"].created_at.tzinfo is not None
    assert events["team.advisors"].created_at.astimezone(UTC) == listed.created_at


def test_second_live_event_for_a_fact_is_a_conflict(
    ledger_unit_of_work: Factory, deal: Deal
) -> None:
    with ledger_unit_of_work() as uow:
        uow.repositories.fact_events.add(make_event(1, deal_id=deal.id, created_at=at(0)))
        uow.commit()

    with ledger_unit_of_work() as uow, pytest.raises(ConflictError):
        uow.repositories.fact_events.add(make_event(2, deal_id=deal.id, created_at=at(1)))


def test_superseded_events_do_not_block_a_new_live_event(
    ledger_unit_of_work: Factory, deal: Deal
) -> None:
    first = make_event(1, deal_id=deal.id, created_at=at(0))
    with ledger_unit_of_work() as uow:
        uow.repositories.fact_events.add(first)
        uow.commit()

    with ledger_unit_of_work() as uow:
        repository = uow.repositories.fact_events
        (stored,) = repository.list_for_fact(deal.id, "financial.arr")
        repository.supersede(stored)
        repository.add(make_event(2, deal_id=deal.id, created_at=at(1), supersedes=stored))
        uow.commit()
        assert stored.event_type is FactEventType.SUPERSEDED

    with ledger_unit_of_work() as uow:
        events = uow.repositories.fact_events.list_for_fact(deal.id, "financial.arr")
    assert [event.event_type for event in events] == [
        FactEventType.SUPERSEDED,
        FactEventType.CREATED,
    ]


def test_superseding_a_stale_read_is_a_conflict(
    ledger_unit_of_work: Factory, deal: Deal
) -> None:
    with ledger_unit_of_work() as uow:
        uow.repositories.fact_events.add(make_event(1, deal_id=deal.id))
        uow.commit()

    with ledger_unit_of_work() as uow:
        (stale,) = uow.repositories.fact_events.list_for_fact(deal.id, "financial.arr")

    with ledger_unit_of_work() as uow:
        (fresh,) = uow.repositories.fact_events.list_for_fact(deal.id, "financial.arr")
        uow.repositories.fact_events.supersede(fresh)
        uow.commit()

    with ledger_unit_of_work() as uow, pytest.raises(ConflictError):
        uow.repositories.fact_events.supersede(stale)


def test_consuming_a_review_twice_is_stale(ledger_unit_of_work: Factory, deal: Deal) -> None:
    event = make_event(1, deal_id=deal.id)
    current = project([event])
    assert current is not None
    review = make_review(current, 2)
    with ledger_unit_of_work() as uow:
        uow.repositories.fact_events.add(event)
        uow.repositories.pending_reviews.add(review)
        uow.commit()

    with ledger_unit_of_work() as uow:
        stored = uow.repositories.pending_reviews.get(review.id)
        assert stored is not None
        uow.repositories.pending_reviews.consume(
            stored, ReviewDecision.ACCEPT_NEW, resolved_by="ba", reason=None, at=at(1)
        )
        uow.commit()
        assert stored.status is ReviewStatus.CONSUMED

    with ledger_unit_of_work() as uow:
        assert uow.repositories.pending_reviews.list_open(deal.id) == []
        with pytest.raises(StaleReviewError):
            uow.repositories.pending_reviews.consume(
                review, ReviewDecision.KEEP_EXISTING, resolved_by="ba", reason=None, at=at(2)
            )


def test_one_resolution_per_alert_key(ledger_unit_of_work: Factory, deal: Deal) -> None:
    first = make_resolution()
    first.deal_id = deal.id
    duplicate = make_resolution()
    duplicate.deal_id = deal.id
    with ledger_unit_of_work() as uow:
        uow.repositories.alert_resolutions.add(first)
        uow.commit()

    with ledger_unit_of_work() as uow, pytest.raises(ConflictError):
        uow.repositories.alert_resolutions.add(duplicate)


def test_delete_resolution(ledger_unit_of_work: Factory, deal: Deal) -> None:
    resolution = make_resolution()
    resolution.deal_id = deal.id
    with ledger_unit_of_work() as uow:
        uow.repositories.alert_resolutions.add(resolution)
        uow.commit()

    with ledger_unit_of_work() as uow:
        assert uow.repositories.alert_resolutions.delete(deal.id, resolution.alert_key)
        assert not uow.repositories.alert_resolutions.delete(deal.id, resolution.alert_key)
        uow.commit()

    with ledger_unit_of_work() as uow:
        assert uow.repositories.alert_resolutions.list_for_deal(deal.id) == []
