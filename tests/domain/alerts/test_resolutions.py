from __future__ import annotations

import pytest

from dealledger.domain.alerts import ResolutionRequest, apply_resolution, count_resolutions
from dealledger.domain.errors import ValidationError
from dealledger.domain.model import AlertType, ResolutionStatus
from tests.helpers.alerts import make_resolution
from tests.helpers.facts import DEAL_ID, at


def _request(**overrides: object) -> ResolutionRequest:
    fields: dict[str, object] = {
        "alert_key": "RED_FLAG::revenue_metrics",
        "status": ResolutionStatus.ACCEPTED,
        "justification": "mitigated by signed LOI",
        "alert_title": "ARR/MRR inconsistency",
        "alert_severity": "critical",
    }
    fields.update(overrides)
    return ResolutionRequest(**fields)  # type: ignore[arg-type]


def test_first_resolution_creates_a_row() -> None:
    resolution = apply_resolution(None, _request(), deal_id=DEAL_ID, user_id="ba", at=at(0))

    assert resolution.alert_type is AlertType.RED_FLAG
    assert resolution.alert_severity == "CRITICAL"
    assert resolution.created_by == "ba"
    assert resolution.created_at == resolution.updated_at == at(0)


def test_second_resolution_updates_in_place() -> None:
    existing = make_resolution()
    original_id = existing.id

    updated = apply_resolution(
        existing,
        _request(status=ResolutionStatus.RESOLVED, justification="founder sent bank export"),
        deal_id=DEAL_ID,
        user_id="ba-2",
        at=at(30),
    )

    assert updated is existing
    assert updated.id == original_id
    assert updated.status is ResolutionStatus.RESOLVED
    assert updated.justification == "founder sent bank export"
    assert updated.updated_at == at(30)
    assert updated.created_at != updated.updated_at


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"justification": "  "}, "justification"),
        ({"alert_title": ""}, "alertTitle"),
        ({"alert_key": "UNKNOWN::x"}, "alertKey"),
    ],
)
def test_requests_are_validated(overrides: dict[str, object], field: str) -> None:
    with pytest.raises(ValidationError) as exc:
        _request(**overrides)

    assert exc.value.field == field


def test_unknown_severity_labels_are_kept_verbatim() -> None:
    resolution = make_resolution(severity=" severe ")

    assert resolution.alert_severity == "SEVERE"


def test_count_resolutions() -> None:
    counts = count_resolutions(
        [
            make_resolution("RED_FLAG::churn", status=ResolutionStatus.RESOLVED),
            make_resolution("RED_FLAG::esop"),
            make_resolution("CONDITIONS::precedent::0123456789abcdef"),
        ]
    )

    assert counts.total == 3
    assert counts.resolved == 1
    assert counts.accepted == 2
    assert counts.by_type == {"CONDITIONS": 1, "RED_FLAG": 2}
