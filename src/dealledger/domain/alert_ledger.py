"""Application services for red flag review, alert resolutions and the adjusted score."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dealledger.domain.alerts import (
    DEFAULT_SEVERITY_CREDITS,
    AdjustedScore,
    ConsolidationSummary,
    ResolutionCounts,
    apply_resolution,
    compute_adjusted_score,
    consolidate,
    count_resolutions,
    summarize,
)
from dealledger.domain.alerts.topics import DEFAULT_TOPIC_STRATEGY
from dealledger.domain.deals import require_owned_deal, require_user
from dealledger.domain.model import utc_now
from dealledger.domain.model.facts import require_text

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from uuid import UUID

    from dealledger.domain.alerts import ResolutionRequest, TopicStrategy
    from dealledger.domain.model import AgentRedFlags, AlertResolution, ConsolidatedFlag
    from dealledger.domain.ports import LedgerUnitOfWorkFactory

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RedFlagReview:
    """Consolidated flags of one run joined with the deal's stored resolutions."""

    flags: list[ConsolidatedFlag]
    summary: ConsolidationSummary
    resolutions: dict[str, AlertResolution] = field(default_factory=dict)

    def resolution_for(self, flag: ConsolidatedFlag) -> AlertResolution | None:
        return self.resolutions.get(flag.alert_key)

    @property
    def unresolved(self) -> list[ConsolidatedFlag]:
        return [flag for flag in self.flags if flag.alert_key not in self.resolutions]


def resolve_alert(
    *,
    deal_id: UUID,
    request: ResolutionRequest,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> AlertResolution:
    """Create or update the resolution of one alert."""

    user_id = require_user(user_id)
    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, user_id)
        repository = uow.repositories.alert_resolutions
        existing = repository.get(deal_id, request.alert_key)
        resolution = apply_resolution(
            existing, request, deal_id=deal_id, user_id=user_id, at=utc_now()
        )
        if existing is None:
            repository.add(resolution)
        uow.commit()

    log.info(
        "Alert %s on deal %s marked %s by %s",
        resolution.alert_key,
        deal_id,
        resolution.status.value,
        user_id,
    )
    return resolution


def unresolve_alert(
    *,
    deal_id: UUID,
    alert_key: str,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> bool:
    """Drop the resolution of an alert; returns whether one existed."""

    alert_key = require_text(alert_key, field_name="alertKey")
    user_id = require_user(user_id)
    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, user_id)
        removed = uow.repositories.alert_resolutions.delete(deal_id, alert_key)
        uow.commit()

    if removed:
        log.info("Alert %s on deal %s unresolved by %s", alert_key, deal_id, user_id)
    return removed


def get_alert_resolution(
    *,
    deal_id: UUID,
    alert_key: str,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> AlertResolution | None:
    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, require_user(user_id))
        return uow.repositories.alert_resolutions.get(deal_id, alert_key)


def list_alert_resolutions(
    *,
    deal_id: UUID,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> list[AlertResolution]:
    with unit_of_work_factory() as uow:
        require_owned_deal(uow.repositories, deal_id, require_user(user_id))
        return uow.repositories.alert_resolutions.list_for_deal(deal_id)


def get_resolution_counts(
    *,
    deal_id: UUID,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
) -> ResolutionCounts:
    return count_resolutions(
        list_alert_resolutions(
            deal_id=deal_id, user_id=user_id, unit_of_work_factory=unit_of_work_factory
        )
    )


def review_red_flags(
    *,
    deal_id: UUID,
    per_agent_red_flags: Iterable[AgentRedFlags],
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
    strategy: TopicStrategy = DEFAULT_TOPIC_STRATEGY,
) -> RedFlagReview:
    """Consolidate a run's red flags and attach any stored resolutions by alert key."""

    per_agent = list(per_agent_red_flags)
    flags = consolidate(per_agent, strategy=strategy)
    summary = summarize(flags, sum(len(agent.red_flags) for agent in per_agent))
    resolutions = {
        resolution.alert_key: resolution
        for resolution in list_alert_resolutions(
            deal_id=deal_id, user_id=user_id, unit_of_work_factory=unit_of_work_factory
        )
    }
    log.info(
        "Consolidated %s raw red flag(s) into %s alert(s) for deal %s",
        summary.total_raw,
        summary.total_consolidated,
        deal_id,
    )
    return RedFlagReview(
        flags=flags,
        summary=summary,
        resolutions={
            flag.alert_key: resolutions[flag.alert_key]
            for flag in flags
            if flag.alert_key in resolutions
        },
    )


def compute_deal_score(
    *,
    deal_id: UUID,
    original_score: float,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory,
    credits: Mapping[str, int] = DEFAULT_SEVERITY_CREDITS,
) -> AdjustedScore:
    resolutions = list_alert_resolutions(
        deal_id=deal_id, user_id=user_id, unit_of_work_factory=unit_of_work_factory
    )
    return compute_adjusted_score(original_score, resolutions, credits=credits)
