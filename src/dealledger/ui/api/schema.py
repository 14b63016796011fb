"""Request and response models of the HTTP API (camelCase on the wire)."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, Any
from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dealledger.domain.model import (
    FactCategory,
    ResolutionStatus,
    ReviewDecision,
    ReviewStatus,
    fact_key_label,
    fact_value_to_json,
)

if TYPE_CHECKING:
    from dealledger.domain.alert_ledger import RedFlagReview
    from dealledger.domain.alerts import AdjustedScore, ConsolidationSummary, ResolutionCounts
    from dealledger.domain.fact_ledger import ClaimBatchResult
    from dealledger.domain.model import (
        AlertResolution,
        ConsolidatedFlag,
        CurrentFact,
        Deal,
        FactEvent,
        PendingReview,
    )
    from dealledger.domain.reconciliation import FactSummary


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# requests


class CreateDealRequest(ApiModel):
    name: str


class OverrideFactRequest(ApiModel):
    fact_key: str
    value: Any
    reason: str
    display_value: str | None = None


class DeleteFactRequest(ApiModel):
    reason: str


class ResolveReviewRequest(ApiModel):
    review_id: UUID
    decision: ReviewDecision
    reason: str | None = None
    override_value: Any = None
    override_display_value: str | None = None


class ResolveAlertRequest(ApiModel):
    alert_key: str
    status: ResolutionStatus
    justification: str
    alert_title: str
    alert_severity: str | None = None
    alert_category: str | None = None


# responses


class DealResponse(ApiModel):
    id: UUID
    name: str
    owner_id: str
    created_at: datetime

    @classmethod
    def from_domain(cls, deal: Deal) -> DealResponse:
        return cls(id=deal.id, name=deal.name, owner_id=deal.owner_id, created_at=deal.created_at)


class FactEventResponse(ApiModel):
    id: UUID
    deal_id: UUID
    fact_key: str
    category: FactCategory
    value: Any
    display_value: str
    unit: str | None
    source: str
    source_confidence: int
    event_type: str
    supersedes_event_id: UUID | None
    created_by: str | None
    reason: str | None
    created_at: datetime

    @classmethod
    def from_domain(cls, event: FactEvent) -> FactEventResponse:
        return cls(
            id=event.id,
            deal_id=event.deal_id,
            fact_key=event.fact_key,
            category=event.category,
            value=fact_value_to_json(event.value),
            display_value=event.display_value,
            unit=event.unit,
            source=event.source,
            source_confidence=event.source_confidence,
            event_type=event.event_type.value,
            supersedes_event_id=event.supersedes_event_id,
            created_by=event.created_by,
            reason=event.reason,
            created_at=event.created_at,
        )


class DisputeDetailResponse(ApiModel):
    review_id: UUID
    conflicting_value: Any
    conflicting_display_value: str
    conflicting_source: str
    conflicting_confidence: int
    reason: str


class IntegrityWarningResponse(ApiModel):
    live_event_ids: list[UUID]
    chosen_event_id: UUID
    message: str


class CurrentFactResponse(ApiModel):
    fact_key: str
    label: str
    category: FactCategory
    current_event_id: UUID
    current_value: Any
    current_display_value: str
    current_source: str
    current_confidence: int
    unit: str | None
    is_disputed: bool
    dispute_details: list[DisputeDetailResponse] = Field(default_factory=list)
    integrity_warning: IntegrityWarningResponse | None = None
    first_seen_at: datetime
    last_updated_at: datetime
    event_history: list[FactEventResponse] | None = None

    @classmethod
    def from_domain(cls, fact: CurrentFact, *, include_history: bool) -> CurrentFactResponse:
        warning = fact.integrity_warning
        return cls(
            fact_key=fact.fact_key,
            label=fact_key_label(fact.fact_key),
            category=fact.category,
            current_event_id=fact.current_event_id,
            current_value=fact_value_to_json(fact.current_value),
            current_display_value=fact.current_display_value,
            current_source=fact.current_source,
            current_confidence=fact.current_confidence,
            unit=fact.unit,
            is_disputed=fact.is_disputed,
            dispute_details=[
                DisputeDetailResponse(
                    review_id=detail.review_id,
                    conflicting_value=fact_value_to_json(detail.conflicting_value),
                    conflicting_display_value=detail.conflicting_display_value,
                    conflicting_source=detail.conflicting_source,
                    conflicting_confidence=detail.conflicting_confidence,
                    reason=detail.reason,
                )
                for detail in fact.dispute_details
            ],
            integrity_warning=(
                IntegrityWarningResponse(
                    live_event_ids=list(warning.live_event_ids),
                    chosen_event_id=warning.chosen_event_id,
                    message=warning.describe(),
                )
                if warning is not None
                else None
            ),
            first_seen_at=fact.first_seen_at,
            last_updated_at=fact.last_updated_at,
            event_history=(
                [FactEventResponse.from_domain(event) for event in fact.event_history]
                if include_history
                else None
            ),
        )


class FactsResponse(ApiModel):
    deal_id: UUID
    facts_count: int
    facts: list[CurrentFactResponse]


class FactSummaryResponse(ApiModel):
    total: int
    by_category: dict[str, int]
    by_source: dict[str, int]
    average_confidence: int
    disputed_count: int
    low_confidence_count: int

    @classmethod
    def from_domain(cls, summary: FactSummary) -> FactSummaryResponse:
        return cls(
            total=summary.total,
            by_category=summary.by_category,
            by_source=summary.by_source,
            average_confidence=summary.average_confidence,
            disputed_count=summary.disputed_count,
            low_confidence_count=summary.low_confidence_count,
        )


class ClaimOutcomeResponse(ApiModel):
    fact_key: str
    status: str
    event_id: UUID | None
    review_id: UUID | None


class ClaimBatchResponse(ApiModel):
    accepted: int
    queued: int
    already_queued: int
    outcomes: list[ClaimOutcomeResponse]

    @classmethod
    def from_domain(cls, result: ClaimBatchResult) -> ClaimBatchResponse:
        return cls(
            accepted=result.accepted,
            queued=result.queued,
            already_queued=result.already_queued,
            outcomes=[
                ClaimOutcomeResponse(
                    fact_key=outcome.fact_key,
                    status=outcome.status.value,
                    event_id=outcome.event_id,
                    review_id=outcome.review_id,
                )
                for outcome in result.outcomes
            ],
        )


class PendingReviewResponse(ApiModel):
    id: UUID
    fact_key: str
    category: FactCategory
    new_value: Any
    new_display_value: str
    new_source: str
    new_confidence: int
    existing_event_id: UUID
    existing_value: Any
    existing_display_value: str
    existing_source: str
    existing_confidence: int
    contradiction_reason: str
    status: ReviewStatus
    created_at: datetime

    @classmethod
    def from_domain(cls, review: PendingReview) -> PendingReviewResponse:
        return cls(
            id=review.id,
            fact_key=review.fact_key,
            category=review.category,
            new_value=fact_value_to_json(review.new_value),
            new_display_value=review.new_display_value,
            new_source=review.new_source,
            new_confidence=review.new_confidence,
            existing_event_id=review.existing_event_id,
            existing_value=fact_value_to_json(review.existing_value),
            existing_display_value=review.existing_display_value,
            existing_source=review.existing_source,
            existing_confidence=review.existing_confidence,
            contradiction_reason=review.contradiction_reason,
            status=review.status,
            created_at=review.created_at,
        )


class PendingReviewsResponse(ApiModel):
    deal_id: UUID
    reviews_count: int
    reviews: list[PendingReviewResponse]


class ResolveReviewResponse(ApiModel):
    decision: ReviewDecision
    event: FactEventResponse | None


class AlertResolutionResponse(ApiModel):
    alert_key: str
    alert_type: str
    status: ResolutionStatus
    justification: str
    alert_title: str
    alert_severity: str | None
    alert_category: str | None
    created_by: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, resolution: AlertResolution) -> AlertResolutionResponse:
        return cls(
            alert_key=resolution.alert_key,
            alert_type=resolution.alert_type.value,
            status=resolution.status,
            justification=resolution.justification,
            alert_title=resolution.alert_title,
            alert_severity=resolution.alert_severity,
            alert_category=resolution.alert_category,
            created_by=resolution.created_by,
            created_at=resolution.created_at,
            updated_at=resolution.updated_at,
        )


class ResolutionCountsResponse(ApiModel):
    total: int
    resolved: int
    accepted: int
    by_type: dict[str, int]

    @classmethod
    def from_domain(cls, counts: ResolutionCounts) -> ResolutionCountsResponse:
        return cls(
            total=counts.total,
            resolved=counts.resolved,
            accepted=counts.accepted,
            by_type=counts.by_type,
        )


class AlertResolutionsResponse(ApiModel):
    deal_id: UUID
    resolutions: list[AlertResolutionResponse]
    counts: ResolutionCountsResponse


class UnresolveResponse(ApiModel):
    alert_key: str
    removed: bool


class FlagDuplicateResponse(ApiModel):
    agent_name: str
    title: str
    severity: str


class ConsolidatedFlagResponse(ApiModel):
    topic: str
    alert_key: str
    severity: str
    title: str
    category: str
    description: str
    evidence: str
    impact: str
    question: str
    detected_by: list[str]
    detection_count: int
    duplicates: list[FlagDuplicateResponse]
    resolution: AlertResolutionResponse | None = None

    @classmethod
    def from_domain(
        cls, flag: ConsolidatedFlag, resolution: AlertResolution | None
    ) -> ConsolidatedFlagResponse:
        return cls(
            topic=flag.topic,
            alert_key=flag.alert_key,
            severity=flag.severity.value,
            title=flag.title,
            category=flag.category,
            description=flag.description,
            evidence=flag.evidence,
            impact=flag.impact,
            question=flag.question,
            detected_by=list(flag.detected_by),
            detection_count=flag.detection_count,
            duplicates=[
                FlagDuplicateResponse(
                    agent_name=instance.agent_name,
                    title=instance.flag.title,
                    severity=instance.flag.severity.value,
                )
                for instance in flag.duplicates
            ],
            resolution=(
                AlertResolutionResponse.from_domain(resolution) if resolution is not None else None
            ),
        )


class ConsolidationSummaryResponse(ApiModel):
    total_raw: int
    total_consolidated: int
    dedup_rate: float
    by_severity: dict[str, int]

    @classmethod
    def from_domain(cls, summary: ConsolidationSummary) -> ConsolidationSummaryResponse:
        return cls(
            total_raw=summary.total_raw,
            total_consolidated=summary.total_consolidated,
            dedup_rate=summary.dedup_rate,
            by_severity=summary.by_severity,
        )


class RedFlagReviewResponse(ApiModel):
    deal_id: UUID
    flags: list[ConsolidatedFlagResponse]
    summary: ConsolidationSummaryResponse

    @classmethod
    def from_domain(cls, deal_id: UUID, review: RedFlagReview) -> RedFlagReviewResponse:
        return cls(
            deal_id=deal_id,
            flags=[
                ConsolidatedFlagResponse.from_domain(flag, review.resolution_for(flag))
                for flag in review.flags
            ],
            summary=ConsolidationSummaryResponse.from_domain(review.summary),
        )


class ScoreAdjustmentResponse(ApiModel):
    alert_key: str
    alert_title: str
    alert_severity: str | None
    status: ResolutionStatus
    points: int


class AdjustedScoreResponse(ApiModel):
    deal_id: UUID
    original_score: int
    adjusted_score: int
    delta: int
    explanation: str
    adjustments: list[ScoreAdjustmentResponse]

    @classmethod
    def from_domain(cls, deal_id: UUID, score: AdjustedScore) -> AdjustedScoreResponse:
        return cls(
            deal_id=deal_id,
            original_score=score.original_score,
            adjusted_score=score.adjusted_score,
            delta=score.delta,
            explanation=score.explanation,
            adjustments=[
                ScoreAdjustmentResponse(
                    alert_key=adjustment.alert_key,
                    alert_title=adjustment.alert_title,
                    alert_severity=adjustment.alert_severity,
                    status=adjustment.status,
                    points=adjustment.points,
                )
                for adjustment in score.adjustments
            ],
        )
