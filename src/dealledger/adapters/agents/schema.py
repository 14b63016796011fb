"""Pydantic models describing the payloads agents hand to the ledger."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _none_to_blank(value: object) -> object:
    return "" if value is None else value


class AgentBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class FactClaimPayload(AgentBaseModel):
    fact_key: str = Field(alias="factKey", min_length=1)
    value: Any
    source: str = Field(min_length=1)
    confidence: int = Field(ge=0, le=100)
    display_value: str | None = Field(default=None, alias="displayValue")
    unit: str | None = None
    reason: str | None = None

    _normalize_optional = field_validator("display_value", "unit", "reason", mode="before")(
        _blank_to_none
    )


class FactClaimBatchPayload(AgentBaseModel):
    claims: list[FactClaimPayload] = Field(default_factory=list[FactClaimPayload])


class EvidencePayload(AgentBaseModel):
    source: str = ""
    quote: str | None = None

    def render(self) -> str:
        if self.quote:
            return f'[{self.source}] "{self.quote}"' if self.source else self.quote
        return f"[{self.source}]" if self.source else ""


class RedFlagPayload(AgentBaseModel):
    title: str = Field(min_length=1)
    severity: str | None = None
    category: str = ""
    description: str = ""
    evidence: str = ""
    impact: str = ""
    question: str = Field(default="", alias="questionForFounder")

    _normalize_text = field_validator(
        "category", "description", "impact", "question", mode="before"
    )(_none_to_blank)

    @field_validator("evidence", mode="before")
    @classmethod
    def _flatten_evidence(cls, value: object) -> object:
        # agents report evidence either as prose or as a list of quoted sources
        if value is None:
            return ""
        if isinstance(value, Sequence) and not isinstance(value, str):
            items = cast(Sequence[object], value)
            parts: list[str] = []
            for item in items:
                if isinstance(item, Mapping):
                    rendered = EvidencePayload.model_validate(item).render()
                else:
                    rendered = str(item)
                if rendered:
                    parts.append(rendered)
            return " | ".join(parts)
        return value


class AgentRedFlagsPayload(AgentBaseModel):
    agent_name: str = Field(alias="agentName", min_length=1)
    red_flags: list[RedFlagPayload] = Field(
        default_factory=list[RedFlagPayload], alias="redFlags"
    )


class RedFlagRunPayload(AgentBaseModel):
    agents: list[AgentRedFlagsPayload] = Field(default_factory=list[AgentRedFlagsPayload])
