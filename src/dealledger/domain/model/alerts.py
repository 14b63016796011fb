"""Red flags as emitted by agents, their consolidated form and human resolutions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dealledger.domain.errors import ValidationError

from .enums import AlertType, ResolutionStatus, Severity
from .facts import new_id, require_text, utc_now

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(slots=True, frozen=True)
class RedFlag:
    """One raw red flag as reported by a single agent."""

    title: str
    severity: Severity = Severity.MEDIUM
    category: str = ""
    description: str = ""
    evidence: str = ""
    impact: str = ""
    question: str = ""


@dataclass(slots=True, frozen=True)
class AgentRedFlags:
    agent_name: str
    red_flags: tuple[RedFlag, ...] = ()


@dataclass(slots=True, frozen=True)
class FlagInstance:
    """A raw flag together with the agent that raised it."""

    agent_name: str
    flag: RedFlag


@dataclass(slots=True, frozen=True)
class ConsolidatedFlag:
    topic: str
    alert_key: str
    severity: Severity
    title: str
    category: str
    description: str
    evidence: str
    impact: str
    question: str
    detected_by: tuple[str, ...]
    duplicates: tuple[FlagInstance, ...]

    @property
    def detection_count(self) -> int:
        return len(self.detected_by)


@dataclass(eq=False, kw_only=True)
class AlertResolution:
    """A human decision on an alert; at most one per ``(deal_id, alert_key)``."""

    id: UUID = field(default_factory=new_id)
    deal_id: UUID
    alert_key: str
    alert_type: AlertType
    status: ResolutionStatus
    justification: str
    alert_title: str
    alert_severity: str | None = None
    alert_category: str | None = None
    created_by: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.alert_key = require_text(self.alert_key, field_name="alertKey")
        self.justification = require_text(self.justification, field_name="justification")
        self.alert_title = require_text(self.alert_title, field_name="alertTitle")
        self.alert_severity = _normalize_severity_label(self.alert_severity)

    def update(
        self,
        *,
        status: ResolutionStatus,
        justification: str,
        alert_title: str,
        alert_severity: str | None,
        alert_category: str | None,
        updated_by: str | None,
        at: datetime | None = None,
    ) -> None:
        self.status = status
        self.justification = require_text(justification, field_name="justification")
        self.alert_title = require_text(alert_title, field_name="alertTitle")
        self.alert_severity = _normalize_severity_label(alert_severity)
        self.alert_category = alert_category
        self.created_by = updated_by or self.created_by
        self.updated_at = at or utc_now()


def _normalize_severity_label(raw: str | None) -> str | None:
    # unknown labels are kept verbatim so they score zero instead of MEDIUM
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ValidationError("alert severity must be a string", field="alertSeverity")
    label = raw.strip().upper()
    return label or None
