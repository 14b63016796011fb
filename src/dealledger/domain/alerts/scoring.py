"""Credit resolved alerts back into a deal score."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from dealledger.domain.model import ResolutionStatus, Severity

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dealledger.domain.model import AlertResolution

MIN_SCORE: Final[int] = 0
MAX_SCORE: Final[int] = 100

DEFAULT_SEVERITY_CREDITS: Final[Mapping[str, int]] = MappingProxyType(
    {
        Severity.CRITICAL.value: 8,
        Severity.HIGH.value: 5,
        Severity.MEDIUM.value: 3,
        Severity.LOW.value: 1,
    }
)

CREDITED_STATUSES: Final[frozenset[ResolutionStatus]] = frozenset(
    {ResolutionStatus.RESOLVED, ResolutionStatus.ACCEPTED}
)


@dataclass(slots=True, frozen=True)
class ScoreAdjustment:
    alert_key: str
    alert_title: str
    alert_severity: str | None
    status: ResolutionStatus
    points: int


@dataclass(slots=True, frozen=True)
class AdjustedScore:
    original_score: int
    adjusted_score: int
    delta: int
    explanation: str
    adjustments: tuple[ScoreAdjustment, ...] = ()

    @property
    def is_adjusted(self) -> bool:
        return self.delta != 0


def clamp_score(score: float) -> int:
    return int(max(MIN_SCORE, min(MAX_SCORE, round(score))))


def credit_for(severity: str | None, credits: Mapping[str, int]) -> int:
    if severity is None:
        return 0
    return credits.get(severity.strip().upper(), 0)


def compute_adjusted_score(
    original_score: float,
    resolutions: Iterable[AlertResolution],
    *,
    credits: Mapping[str, int] = DEFAULT_SEVERITY_CREDITS,
) -> AdjustedScore:
    """Add one severity credit per resolved alert key, never below the original nor above 100."""

    original = clamp_score(original_score)

    best_by_key: dict[str, ScoreAdjustment] = {}
    for resolution in resolutions:
        if resolution.status not in CREDITED_STATUSES:
            continue
        candidate = ScoreAdjustment(
            alert_key=resolution.alert_key,
            alert_title=resolution.alert_title,
            alert_severity=resolution.alert_severity,
            status=resolution.status,
            points=credit_for(resolution.alert_severity, credits),
        )
        previous = best_by_key.get(resolution.alert_key)
        if previous is None or candidate.points > previous.points:
            best_by_key[resolution.alert_key] = candidate

    adjustments = tuple(best_by_key[key] for key in sorted(best_by_key))
    credited = sum(adjustment.points for adjustment in adjustments)
    adjusted = max(original, min(MAX_SCORE, original + credited))
    delta = adjusted - original

    return AdjustedScore(
        original_score=original,
        adjusted_score=adjusted,
        delta=delta,
        explanation=_explain(adjustments, credited=credited, delta=delta),
        adjustments=adjustments,
    )


def _explain(adjustments: tuple[ScoreAdjustment, ...], *, credited: int, delta: int) -> str:
    if not adjustments:
        return "No resolved alerts; score unchanged."
    if credited == 0:
        return f"{len(adjustments)} resolved alert(s) carry no severity credit; score unchanged."
    parts: list[str] = []
    for severity in Severity:
        matching = [a for a in adjustments if a.alert_severity == severity.value]
        if matching:
            parts.append(f"{len(matching)} {severity.value} x {matching[0].points}")
    breakdown = ", ".join(parts) if parts else "no credited severities"
    text = f"+{delta} point(s) from {len(adjustments)} resolved alert(s) ({breakdown})"
    if delta < credited:
        text += f"; capped at {MAX_SCORE}"
    return text + "."
