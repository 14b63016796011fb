"""Translate agent payloads into domain claims and red flags."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from dealledger.domain.errors import ValidationError
from dealledger.domain.model import AgentRedFlags, FactClaim, RedFlag, Severity

from .schema import FactClaimBatchPayload, RedFlagRunPayload

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from .schema import AgentRedFlagsPayload, FactClaimPayload, RedFlagPayload

log = getLogger(__name__)


def translate_claim(payload: FactClaimPayload) -> FactClaim:
    return FactClaim(
        fact_key=payload.fact_key,
        value=payload.value,
        source=payload.source,
        confidence=payload.confidence,
        display_value=payload.display_value,
        unit=payload.unit,
        reason=payload.reason,
    )


def translate_claims(payloads: Iterable[FactClaimPayload]) -> list[FactClaim]:
    return [translate_claim(payload) for payload in payloads]


def translate_red_flag(payload: RedFlagPayload) -> RedFlag:
    return RedFlag(
        title=payload.title.strip(),
        severity=Severity.parse(payload.severity),
        category=payload.category.strip(),
        description=payload.description.strip(),
        evidence=payload.evidence.strip(),
        impact=payload.impact.strip(),
        question=payload.question.strip(),
    )


def translate_agent_red_flags(payload: AgentRedFlagsPayload) -> AgentRedFlags:
    return AgentRedFlags(
        agent_name=payload.agent_name.strip(),
        red_flags=tuple(translate_red_flag(flag) for flag in payload.red_flags),
    )


def translate_red_flag_run(payload: RedFlagRunPayload) -> list[AgentRedFlags]:
    agents = [translate_agent_red_flags(agent) for agent in payload.agents]
    log.debug(
        "Translated %s agent(s) with %s red flag(s)",
        len(agents),
        sum(len(agent.red_flags) for agent in agents),
    )
    return agents


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValidationError(f"cannot read {path}: {exc}", field="file") from exc


def _first_error(exc: PydanticValidationError) -> ValidationError:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return ValidationError(f"{location}: {error.get('msg', 'invalid value')}", field=location)


def load_claims_file(path: Path) -> list[FactClaim]:
    """Read ``{"claims": [...]}`` from a JSON file."""

    try:
        payload = FactClaimBatchPayload.model_validate_json(_read(path))
    except PydanticValidationError as exc:
        raise _first_error(exc) from exc
    return translate_claims(payload.claims)


def load_red_flags_file(path: Path) -> list[AgentRedFlags]:
    """Read ``{"agents": [{"agentName": ..., "redFlags": [...]}]}`` from a JSON file."""

    try:
        payload = RedFlagRunPayload.model_validate_json(_read(path))
    except PydanticValidationError as exc:
        raise _first_error(exc) from exc
    return translate_red_flag_run(payload)
