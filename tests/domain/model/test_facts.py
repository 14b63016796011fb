from __future__ import annotations

import pytest

from dealledger.domain.errors import ConflictError, StaleReviewError, ValidationError
from dealledger.domain.model import (
    BA_OVERRIDE,
    FactCategory,
    FactClaim,
    FactEvent,
    FactEventType,
    NumberValue,
    ReviewDecision,
    ReviewStatus,
)
from dealledger.domain.reconciliation import project
from tests.helpers.facts import DEAL_ID, make_event, make_review


def test_event_derives_category_and_display_value() -> None:
    event = make_event(1_000_000, fact_key="financial.arr")

    assert event.category is FactCategory.FINANCIAL
    assert event.display_value == "1,000,000"
    assert event.value == NumberValue(1_000_000)


def test_unknown_fact_key_prefix_falls_into_other() -> None:
    assert make_event("x", fact_key="custom.thing").category is FactCategory.OTHER


@pytest.mark.parametrize("fact_key", ["", "financial.", ".arr", "financial arr", "a..b"])
def test_invalid_fact_keys_are_rejected(fact_key: str) -> None:
    with pytest.raises(ValidationError) as exc:
        make_event(fact_key=fact_key)

    assert exc.value.field == "factKey"


@pytest.mark.parametrize("confidence", [-1, 101])
def test_confidence_must_be_a_percentage(confidence: int) -> None:
    with pytest.raises(ValidationError):
        make_event(confidence=confidence)


def test_override_events_must_carry_full_confidence() -> None:
    with pytest.raises(ValidationError) as exc:
        make_event(source=BA_OVERRIDE, confidence=90, reason="checked the bank statement")

    assert exc.value.field == "sourceConfidence"


def test_override_events_require_a_reason() -> None:
    with pytest.raises(ValidationError) as exc:
        make_event(source=BA_OVERRIDE, confidence=100)

    assert exc.value.field == "reason"


def test_tombstones_require_a_reason() -> None:
    with pytest.raises(ValidationError):
        FactEvent(
            deal_id=DEAL_ID,
            fact_key="financial.arr",
            value=1,
            source="PITCH_DECK",
            source_confidence=70,
            event_type=FactEventType.DELETED,
        )


def test_mark_superseded_only_once() -> None:
    event = make_event()
    event.mark_superseded()

    assert event.event_type is FactEventType.SUPERSEDED
    with pytest.raises(ConflictError):
        event.mark_superseded()


def test_review_can_be_consumed_once() -> None:
    current = project([make_event()])
    assert current is not None
    review = make_review(current)

    review.consume(ReviewDecision.KEEP_EXISTING, resolved_by="analyst-1", reason=None)

    assert review.status is ReviewStatus.CONSUMED
    assert review.decision is ReviewDecision.KEEP_EXISTING
    assert review.resolved_at is not None
    with pytest.raises(StaleReviewError):
        review.consume(ReviewDecision.ACCEPT_NEW, resolved_by="analyst-1", reason=None)


def test_claim_validates_on_construction() -> None:
    with pytest.raises(ValidationError):
        FactClaim(fact_key="financial.arr", value=1, source=" ", confidence=50)

    claim = FactClaim(
        fact_key="financial.arr", value=NumberValue(5), source=BA_OVERRIDE, confidence=1
    )
    assert claim.is_override
    assert claim.rendered_display_value() == "5"
