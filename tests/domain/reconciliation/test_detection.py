from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from dealledger.domain.model import BA_OVERRIDE, OVERRIDE_CONFIDENCE, FactEventType
from dealledger.domain.reconciliation import (
    Accept,
    AcceptReason,
    Reject,
    Significance,
    classify_difference,
    evaluate,
    project,
    relative_difference,
)
from tests.helpers.facts import DEAL_ID, T0, at, make_claim, make_event

if TYPE_CHECKING:
    from dealledger.domain.model import CurrentFact, FactEvent


def _current(event: FactEvent) -> CurrentFact:
    fact = project([event])
    assert fact is not None
    return fact


def test_first_claim_is_accepted_as_new_fact() -> None:
    decision = evaluate(None, make_claim(1_000_000, confidence=70))

    assert isinstance(decision, Accept)
    assert decision.reason is AcceptReason.NEW_FACT
    assert decision.confidence == 70
    assert decision.supersedes_event_id is None


def test_equal_value_supersedes_the_current_event() -> None:
    current = _current(make_event(1_000_000))

    decision = evaluate(current, make_claim(1_000_000.0, source="DATA_ROOM", confidence=90))

    assert isinstance(decision, Accept)
    assert decision.reason is AcceptReason.SAME_VALUE
    assert decision.supersedes_event_id == current.current_event_id
    event = decision.build_event(DEAL_ID, make_claim(1_000_000.0), created_at=at(1))
    assert event.supersedes_event_id == current.current_event_id
    assert event.unit == "EUR"


def test_override_claims_bypass_detection() -> None:
    current = _current(make_event(1_000_000))
    claim = make_claim(900_000, source=BA_OVERRIDE, confidence=40, reason="audited figure")

    decision = evaluate(current, claim)

    assert isinstance(decision, Accept)
    assert decision.reason is AcceptReason.OVERRIDE
    assert decision.confidence == OVERRIDE_CONFIDENCE
    event = decision.build_event(DEAL_ID, claim, created_at=at(1))
    assert event.source_confidence == OVERRIDE_CONFIDENCE
    assert event.event_type is FactEventType.CREATED


def test_different_value_becomes_a_pending_review() -> None:
    current = _current(make_event(1_000_000, source="PITCH_DECK", confidence=70))

    decision = evaluate(
        current, make_claim(1_200_000, source="FINANCIAL_MODEL", confidence=85), now=T0
    )

    assert isinstance(decision, Reject)
    review = decision.review
    assert review.existing_event_id == current.current_event_id
    assert review.new_confidence == 85
    assert review.created_at == T0
    assert review.contradiction_reason == (
        'SIGNIFICANT contradiction on "financial.arr": 1,000,000 (PITCH_DECK) vs '
        "1,200,000 (FINANCIAL_MODEL) (20.0% difference)"
    )


def test_kind_mismatch_is_described() -> None:
    current = _current(make_event("Berlin", fact_key="team.location"))

    decision = evaluate(current, make_claim(["Berlin", "Paris"], fact_key="team.location"))

    assert isinstance(decision, Reject)
    assert "(text vs list)" in decision.review.contradiction_reason


@pytest.mark.parametrize(
    ("difference", "expected"),
    [
        (0.0, Significance.MINOR),
        (0.149, Significance.MINOR),
        (0.15, Significance.SIGNIFICANT),
        (0.29, Significance.SIGNIFICANT),
        (0.30, Significance.MAJOR),
        (2.0, Significance.MAJOR),
    ],
)
def test_classify_difference(difference: float, expected: Significance) -> None:
    assert classify_difference(difference) is expected


def test_relative_difference_from_zero_counts_as_full_change() -> None:
    assert relative_difference(0, 5) == 1.0
    assert relative_difference(100, 50) == 0.5
