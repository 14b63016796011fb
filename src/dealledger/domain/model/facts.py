"""Fact ledger entities: append-only events, pending reviews and the derived current fact."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final
from uuid import UUID, uuid4

from dealledger.domain.errors import ConflictError, StaleReviewError, ValidationError

from .enums import (
    BA_OVERRIDE,
    OVERRIDE_CONFIDENCE,
    FactCategory,
    FactEventType,
    ReviewDecision,
    ReviewStatus,
)
from .values import fact_value_from_json, render_display_value

if TYPE_CHECKING:
    from dealledger.domain.errors import IntegrityWarning

    from .values import FactValue


_FACT_KEY: Final = re.compile(r"^[A-Za-z0-9_]+(?:\.[A-Za-z0-9_]+)*$")


def new_id() -> UUID:
    return uuid4()


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def validate_fact_key(fact_key: str) -> str:
    key = fact_key.strip() if isinstance(fact_key, str) else ""
    if not key or _FACT_KEY.match(key) is None:
        raise ValidationError(f"invalid fact key: {fact_key!r}", field="factKey")
    return key


def validate_confidence(confidence: int, *, field_name: str = "confidence") -> int:
    if isinstance(confidence, bool) or not isinstance(confidence, int):
        raise ValidationError("confidence must be an integer", field=field_name)
    if not 0 <= confidence <= 100:  # noqa: PLR2004
        raise ValidationError("confidence must be between 0 and 100", field=field_name)
    return confidence


def require_text(value: str | None, *, field_name: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{field_name} must not be empty", field=field_name)
    return text


@dataclass(eq=False, kw_only=True)
class FactEvent:
    """One immutable claim about a fact of a deal.

    The only state change ever applied after creation is the CREATED ->
    SUPERSEDED transition performed when a successor is appended.
    """

    id: UUID = field(default_factory=new_id)
    deal_id: UUID
    fact_key: str
    value: FactValue
    display_value: str = ""
    source: str
    source_confidence: int
    event_type: FactEventType = FactEventType.CREATED
    unit: str | None = None
    supersedes_event_id: UUID | None = None
    created_by: str | None = None
    reason: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    category: FactCategory = field(init=False)

    def __post_init__(self) -> None:
        self.fact_key = validate_fact_key(self.fact_key)
        self.category = FactCategory.from_fact_key(self.fact_key)
        self.value = fact_value_from_json(self.value)
        self.source = require_text(self.source, field_name="source")
        self.source_confidence = validate_confidence(
            self.source_confidence, field_name="sourceConfidence"
        )
        if not self.display_value:
            self.display_value = render_display_value(self.value)
        if self.source == BA_OVERRIDE and self.source_confidence != OVERRIDE_CONFIDENCE:
            raise ValidationError(
                f"{BA_OVERRIDE} events must carry confidence {OVERRIDE_CONFIDENCE}",
                field="sourceConfidence",
            )
        if self.is_human_authored:
            self.reason = require_text(self.reason, field_name="reason")

    @property
    def is_live(self) -> bool:
        return self.event_type is FactEventType.CREATED

    @property
    def is_override(self) -> bool:
        return self.source == BA_OVERRIDE

    @property
    def is_human_authored(self) -> bool:
        return self.is_override or self.event_type is FactEventType.DELETED

    @property
    def ordering_key(self) -> tuple[datetime, str]:
        """Deterministic recency key; ties on timestamp fall back to the id."""
        return (self.created_at, str(self.id))

    def mark_superseded(self) -> None:
        if self.event_type is not FactEventType.CREATED:
            raise ConflictError(
                f"Event {self.id} for {self.fact_key!r} is no longer current "
                f"({self.event_type.value})"
            )
        self.event_type = FactEventType.SUPERSEDED


@dataclass(eq=False, kw_only=True)
class PendingReview:
    """A contradicting claim parked until a human decides on it."""

    id: UUID = field(default_factory=new_id)
    deal_id: UUID
    fact_key: str
    new_value: FactValue
    new_display_value: str = ""
    new_source: str
    new_confidence: int
    existing_event_id: UUID
    existing_value: FactValue
    existing_display_value: str = ""
    existing_source: str
    existing_confidence: int
    contradiction_reason: str
    created_at: datetime = field(default_factory=utc_now)

    status: ReviewStatus = ReviewStatus.OPEN
    decision: ReviewDecision | None = None
    resolved_at: datetime | None = None
    resolved_by: str | None = None
    resolution_reason: str | None = None

    category: FactCategory = field(init=False)

    def __post_init__(self) -> None:
        self.fact_key = validate_fact_key(self.fact_key)
        self.category = FactCategory.from_fact_key(self.fact_key)
        self.new_value = fact_value_from_json(self.new_value)
        self.existing_value = fact_value_from_json(self.existing_value)
        if not self.new_display_value:
            self.new_display_value = render_display_value(self.new_value)
        if not self.existing_display_value:
            self.existing_display_value = render_display_value(self.existing_value)

    @property
    def is_open(self) -> bool:
        return self.status is ReviewStatus.OPEN

    def consume(
        self,
        decision: ReviewDecision,
        *,
        resolved_by: str | None,
        reason: str | None,
        at: datetime | None = None,
    ) -> None:
        if not self.is_open:
            raise StaleReviewError(self.id)
        self.status = ReviewStatus.CONSUMED
        self.decision = decision
        self.resolved_by = resolved_by
        self.resolution_reason = reason
        self.resolved_at = at or utc_now()


@dataclass(slots=True, frozen=True)
class DisputeDetail:
    review_id: UUID
    conflicting_value: FactValue
    conflicting_display_value: str
    conflicting_source: str
    conflicting_confidence: int
    reason: str

    @classmethod
    def from_review(cls, review: PendingReview) -> DisputeDetail:
        return cls(
            review_id=review.id,
            conflicting_value=review.new_value,
            conflicting_display_value=review.new_display_value,
            conflicting_source=review.new_source,
            conflicting_confidence=review.new_confidence,
            reason=review.contradiction_reason,
        )


@dataclass(slots=True, frozen=True)
class CurrentFact:
    """Read model: the single current value of one fact."""

    deal_id: UUID
    fact_key: str
    category: FactCategory
    current_event_id: UUID
    current_value: FactValue
    current_display_value: str
    current_source: str
    current_confidence: int
    unit: str | None
    is_disputed: bool
    first_seen_at: datetime
    last_updated_at: datetime
    dispute_details: tuple[DisputeDetail, ...] = ()
    integrity_warning: IntegrityWarning | None = None
    event_history: tuple[FactEvent, ...] = ()


@dataclass(slots=True, frozen=True)
class FactClaim:
    """A structured ``(fact_key, value)`` claim as emitted by an extraction source."""

    fact_key: str
    value: FactValue
    source: str
    confidence: int
    display_value: str | None = None
    unit: str | None = None
    created_by: str | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fact_key", validate_fact_key(self.fact_key))
        object.__setattr__(self, "value", fact_value_from_json(self.value))
        object.__setattr__(self, "source", require_text(self.source, field_name="source"))
        validate_confidence(self.confidence)

    @property
    def is_override(self) -> bool:
        return self.source == BA_OVERRIDE

    def rendered_display_value(self) -> str:
        return self.display_value or render_display_value(self.value)
