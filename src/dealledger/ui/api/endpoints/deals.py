"""Deal endpoints: creation, red flag consolidation, alert resolutions and the score."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from dealledger.adapters.agents import RedFlagRunPayload, translate_red_flag_run
from dealledger.domain import alert_ledger, deals
from dealledger.domain.alerts import ResolutionRequest, count_resolutions
from dealledger.ui.api.dependencies import DealId, SeverityCredits, UnitOfWorkFactory, UserId
from dealledger.ui.api.schema import (
    AdjustedScoreResponse,
    AlertResolutionResponse,
    AlertResolutionsResponse,
    CreateDealRequest,
    DealResponse,
    RedFlagReviewResponse,
    ResolutionCountsResponse,
    ResolveAlertRequest,
    UnresolveResponse,
)

router = APIRouter(prefix="/deals", tags=["Deals"])


@router.post(
    "",
    response_model=DealResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a deal owned by the caller",
    operation_id="create_deal",
)
def create_deal(
    body: CreateDealRequest,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> DealResponse:
    deal = deals.create_deal(
        name=body.name, user_id=user_id, unit_of_work_factory=unit_of_work_factory
    )
    return DealResponse.from_domain(deal)


@router.get(
    "/{deal_id}",
    response_model=DealResponse,
    summary="Fetch a deal",
    operation_id="get_deal",
)
def get_deal(
    deal_id: DealId,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> DealResponse:
    deal = deals.get_deal(
        deal_id=deal_id, user_id=user_id, unit_of_work_factory=unit_of_work_factory
    )
    return DealResponse.from_domain(deal)


@router.post(
    "/{deal_id}/red-flags/consolidate",
    response_model=RedFlagReviewResponse,
    summary="Consolidate the red flags of one analysis run",
    operation_id="consolidate_red_flags",
)
def consolidate_red_flags(
    deal_id: DealId,
    body: RedFlagRunPayload,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> RedFlagReviewResponse:
    review = alert_ledger.review_red_flags(
        deal_id=deal_id,
        per_agent_red_flags=translate_red_flag_run(body),
        user_id=user_id,
        unit_of_work_factory=unit_of_work_factory,
    )
    return RedFlagReviewResponse.from_domain(deal_id, review)


@router.get(
    "/{deal_id}/resolutions",
    response_model=AlertResolutionsResponse,
    summary="Alert resolutions of a deal",
    operation_id="list_alert_resolutions",
)
def list_resolutions(
    deal_id: DealId,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> AlertResolutionsResponse:
    resolutions = alert_ledger.list_alert_resolutions(
        deal_id=deal_id, user_id=user_id, unit_of_work_factory=unit_of_work_factory
    )
    return AlertResolutionsResponse(
        deal_id=deal_id,
        resolutions=[AlertResolutionResponse.from_domain(item) for item in resolutions],
        counts=ResolutionCountsResponse.from_domain(count_resolutions(resolutions)),
    )


@router.post(
    "/{deal_id}/resolutions",
    response_model=AlertResolutionResponse,
    summary="Resolve or accept an alert",
    operation_id="resolve_alert",
)
def resolve_alert(
    deal_id: DealId,
    body: ResolveAlertRequest,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> AlertResolutionResponse:
    resolution = alert_ledger.resolve_alert(
        deal_id=deal_id,
        request=ResolutionRequest(
            alert_key=body.alert_key,
            status=body.status,
            justification=body.justification,
            alert_title=body.alert_title,
            alert_severity=body.alert_severity,
            alert_category=body.alert_category,
        ),
        user_id=user_id,
        unit_of_work_factory=unit_of_work_factory,
    )
    return AlertResolutionResponse.from_domain(resolution)


@router.delete(
    "/{deal_id}/resolutions/{alert_key:path}",
    response_model=UnresolveResponse,
    summary="Remove the resolution of an alert",
    operation_id="unresolve_alert",
)
def unresolve_alert(
    deal_id: DealId,
    alert_key: str,
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
) -> UnresolveResponse:
    removed = alert_ledger.unresolve_alert(
        deal_id=deal_id,
        alert_key=alert_key,
        user_id=user_id,
        unit_of_work_factory=unit_of_work_factory,
    )
    return UnresolveResponse(alert_key=alert_key, removed=removed)


@router.get(
    "/{deal_id}/score",
    response_model=AdjustedScoreResponse,
    summary="Score adjusted for resolved alerts",
    operation_id="get_adjusted_score",
)
def get_adjusted_score(
    deal_id: DealId,
    original_score: Annotated[float, Query(alias="originalScore")],
    user_id: UserId,
    unit_of_work_factory: UnitOfWorkFactory,
    credits: SeverityCredits,
) -> AdjustedScoreResponse:
    score = alert_ledger.compute_deal_score(
        deal_id=deal_id,
        original_score=original_score,
        user_id=user_id,
        unit_of_work_factory=unit_of_work_factory,
        credits=credits,
    )
    return AdjustedScoreResponse.from_domain(deal_id, score)
