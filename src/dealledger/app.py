"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from dealledger.adapters.agents import load_claims_file, load_red_flags_file
from dealledger.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyLedgerUnitOfWork,
    is_started,
    startup,
)
from dealledger.config import get_scoring_config
from dealledger.domain.alert_ledger import compute_deal_score, review_red_flags
from dealledger.domain.fact_ledger import record_fact_claims

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path
    from uuid import UUID

    from dealledger.domain.alert_ledger import RedFlagReview
    from dealledger.domain.alerts import AdjustedScore
    from dealledger.domain.fact_ledger import ClaimBatchResult
    from dealledger.domain.ports import LedgerUnitOfWorkFactory


log = getLogger(__name__)


def ledger_unit_of_work_factory(
    unit_of_work_factory: LedgerUnitOfWorkFactory | None = None,
) -> LedgerUnitOfWorkFactory:
    """Return the given factory, or the SQLAlchemy one after starting the adapter."""

    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyLedgerUnitOfWork


def severity_credits(credits: Mapping[str, int] | None = None) -> Mapping[str, int]:
    return credits if credits is not None else get_scoring_config().credits


def ingest_claims_file(
    path: Path,
    *,
    deal_id: UUID,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory | None = None,
) -> ClaimBatchResult:
    """Record every claim of an agent output file against a deal."""

    claims = load_claims_file(path)
    log.info("Ingesting %s claim(s) from %s into deal %s", len(claims), path, deal_id)
    result = record_fact_claims(
        deal_id=deal_id,
        claims=claims,
        user_id=user_id,
        unit_of_work_factory=ledger_unit_of_work_factory(unit_of_work_factory),
    )
    log.info(
        f"Finished ingest: accepted={result.accepted}, queued={result.queued}, "
        f"already_queued={result.already_queued}"
    )
    return result


def consolidate_red_flags_file(
    path: Path,
    *,
    deal_id: UUID,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory | None = None,
) -> RedFlagReview:
    """Consolidate one agent run's red flags and join the deal's resolutions."""

    return review_red_flags(
        deal_id=deal_id,
        per_agent_red_flags=load_red_flags_file(path),
        user_id=user_id,
        unit_of_work_factory=ledger_unit_of_work_factory(unit_of_work_factory),
    )


def adjusted_deal_score(
    *,
    deal_id: UUID,
    original_score: float,
    user_id: str,
    unit_of_work_factory: LedgerUnitOfWorkFactory | None = None,
    credits: Mapping[str, int] | None = None,
) -> AdjustedScore:
    return compute_deal_score(
        deal_id=deal_id,
        original_score=original_score,
        user_id=user_id,
        unit_of_work_factory=ledger_unit_of_work_factory(unit_of_work_factory),
        credits=severity_credits(credits),
    )
