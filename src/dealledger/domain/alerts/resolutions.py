"""Alert resolution upsert rules and aggregate counts."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dealledger.domain.model import AlertResolution, ResolutionStatus
from dealledger.domain.model.facts import require_text

from .keys import alert_type_for_key

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from uuid import UUID


@dataclass(slots=True, frozen=True)
class ResolutionRequest:
    alert_key: str
    status: ResolutionStatus
    justification: str
    alert_title: str
    alert_severity: str | None = None
    alert_category: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "alert_key", require_text(self.alert_key, field_name="alertKey"))
        object.__setattr__(
            self, "justification", require_text(self.justification, field_name="justification")
        )
        object.__setattr__(
            self, "alert_title", require_text(self.alert_title, field_name="alertTitle")
        )
        alert_type_for_key(self.alert_key)


def apply_resolution(
    existing: AlertResolution | None,
    request: ResolutionRequest,
    *,
    deal_id: UUID,
    user_id: str | None,
    at: datetime,
) -> AlertResolution:
    """Create the resolution or update the existing row in place (upsert)."""

    if existing is not None:
        existing.update(
            status=request.status,
            justification=request.justification,
            alert_title=request.alert_title,
            alert_severity=request.alert_severity,
            alert_category=request.alert_category,
            updated_by=user_id,
            at=at,
        )
        return existing
    return AlertResolution(
        deal_id=deal_id,
        alert_key=request.alert_key,
        alert_type=alert_type_for_key(request.alert_key),
        status=request.status,
        justification=request.justification,
        alert_title=request.alert_title,
        alert_severity=request.alert_severity,
        alert_category=request.alert_category,
        created_by=user_id,
        created_at=at,
        updated_at=at,
    )


@dataclass(slots=True, frozen=True)
class ResolutionCounts:
    total: int
    resolved: int
    accepted: int
    by_type: dict[str, int] = field(default_factory=dict[str, int])


def count_resolutions(resolutions: Iterable[AlertResolution]) -> ResolutionCounts:
    items = list(resolutions)
    statuses = Counter(resolution.status for resolution in items)
    by_type = Counter(resolution.alert_type.value for resolution in items)
    return ResolutionCounts(
        total=len(items),
        resolved=statuses[ResolutionStatus.RESOLVED],
        accepted=statuses[ResolutionStatus.ACCEPTED],
        by_type=dict(sorted(by_type.items())),
    )
