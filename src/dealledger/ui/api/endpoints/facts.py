"""Fact ledger endpoints: current facts, overrides, claims and pending reviews."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from dealledger.adapters.agents import FactClaimBatchPayload, translate_claims
from dealledger.domain import fact_ledger
from dealledger.domain.errors import NotFoundError, StaleReviewError
from dealledger.ui.api.dependencies import DealId, UnitOfWorkFactory, UserId
from dealledger.ui.api.schema import (
    ClaimBatchResponse,
    CurrentFactResponse,
    DeleteFactRequest,
    FactEventResponse,
    FactsResponse,
    FactSummaryResponse,
    OverrideFactRequest,
    PendingReviewResponse,
    PendingReviewsResponse,
    ResolveReviewRequest,
    ResolveReviewResponse,
)

router = APIRouter(prefix="/facts", tags=["Facts"])


@router.get(
    "/{deal_id}",
    response_model=FactsResponse,
    summary="Current facts of a deal",
    operation_id="list_current_facts",
)
def list_current_facts(
    deal_id: DealId,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
    category: Annotated[str | None, Query()] = None,
    include_history: Annotated[bool, Query(alias="includeHistory")] = False,
) -> FactsResponse:
    facts = fact_ledger.get_current_facts(
        deal_id=deal_id,
        user_id=user_id,
        unit_of_work_factory=unit_of_work_factory,
        category=fact_ledger.parse_category(category),
    )
    return FactsResponse(
        deal_id=deal_id,
        facts_count=len(facts),
        facts=[
            CurrentFactResponse.from_domain(fact, include_history=include_history)
            for fact in facts
        ],
    )


@router.post(
    "/{deal_id}",
    response_model=FactEventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Override a fact with a human value",
    operation_id="override_fact",
)
def override_fact(
    deal_id: DealId,
    body: OverrideFactRequest,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> FactEventResponse:
    event = fact_ledger.override_fact(
        deal_id=deal_id,
        fact_key=body.fact_key,
        value=body.value,
        display_value=body.display_value,
        reason=body.reason,
        user_id=user_id,
        unit_of_work_factory=unit_of_work_factory,
    )
    return FactEventResponse.from_domain(event)


@router.post(
    "/{deal_id}/claims",
    response_model=ClaimBatchResponse,
    summary="Record extracted claims",
    operation_id="record_fact_claims",
)
def record_claims(
    deal_id: DealId,
    body: FactClaimBatchPayload,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> ClaimBatchResponse:
    result = fact_ledger.record_fact_claims(
        deal_id=deal_id,
        claims=translate_claims(body.claims),
        user_id=user_id,
        unit_of_work_factory=unit_of_work_factory,
    )
    return ClaimBatchResponse.from_domain(result)


@router.get(
    "/{deal_id}/summary",
    response_model=FactSummaryResponse,
    summary="Aggregate view of the current facts",
    operation_id="get_fact_summary",
)
def get_fact_summary(
    deal_id: DealId,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> FactSummaryResponse:
    summary = fact_ledger.get_fact_summary(
        deal_id=deal_id, user_id=user_id, unit_of_work_factory=unit_of_work_factory
    )
    return FactSummaryResponse.from_domain(summary)


@router.get(
    "/{deal_id}/reviews",
    response_model=PendingReviewsResponse,
    summary="Open contradictions awaiting a decision",
    operation_id="list_pending_reviews",
)
def list_pending_reviews(
    deal_id: DealId,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> PendingReviewsResponse:
    reviews = fact_ledger.list_pending_reviews(
        deal_id=deal_id, user_id=user_id, unit_of_work_factory=unit_of_work_factory
    )
    return PendingReviewsResponse(
        deal_id=deal_id,
        reviews_count=len(reviews),
        reviews=[PendingReviewResponse.from_domain(review) for review in reviews],
    )


@router.post(
    "/{deal_id}/reviews",
    response_model=ResolveReviewResponse,
    summary="Resolve a pending review",
    operation_id="resolve_pending_review",
)
def resolve_pending_review(
    deal_id: DealId,
    body: ResolveReviewRequest,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> ResolveReviewResponse:
    try:
        event = fact_ledger.resolve_pending_review(
            deal_id=deal_id,
            review_id=body.review_id,
            decision=body.decision,
            reason=body.reason,
            override_value=body.override_value,
            override_display_value=body.override_display_value,
            user_id=user_id,
            unit_of_work_factory=unit_of_work_factory,
        )
    except (StaleReviewError, NotFoundError) as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ResolveReviewResponse(
        decision=body.decision,
        event=FactEventResponse.from_domain(event) if event is not None else None,
    )


@router.get(
    "/{deal_id}/{fact_key}",
    response_model=CurrentFactResponse,
    summary="One current fact with its history",
    operation_id="get_current_fact",
)
def get_current_fact(
    deal_id: DealId,
    fact_key: str,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> CurrentFactResponse:
    fact = fact_ledger.get_current_fact(
        deal_id=deal_id,
        fact_key=fact_key,
        user_id=user_id,
        unit_of_work_factory=unit_of_work_factory,
    )
    if fact is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Fact {fact_key!r} has no current value",
        )
    return CurrentFactResponse.from_domain(fact, include_history=True)


@router.delete(
    "/{deal_id}/{fact_key}",
    response_model=FactEventResponse,
    summary="Delete the current value of a fact",
    operation_id="delete_fact",
)
def delete_fact(
    deal_id: DealId,
    fact_key: str,
    body: DeleteFactRequest,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> FactEventResponse:
    event = fact_ledger.delete_fact(
        deal_id=deal_id,
        fact_key=fact_key,
        reason=body.reason,
        user_id=user_id,
        unit_of_work_factory=unit_of_work_factory,
    )
    return FactEventResponse.from_domain(event)
