from __future__ import annotations

from typing import TYPE_CHECKING

from dealledger.domain.alerts import consolidate, flatten, summarize
from dealledger.domain.model import Severity
from tests.helpers.alerts import agent, make_flag

if TYPE_CHECKING:
    from dealledger.domain.model import AgentRedFlags


def _arr_mrr_run() -> list[AgentRedFlags]:
    severities = [Severity.HIGH, Severity.HIGH, Severity.CRITICAL, Severity.MEDIUM, Severity.HIGH]
    evidence = [
        "Deck says ARR 1.2M",
        "ARR 1.2M in deck vs MRR 80k in data room",
        "Mismatch",
        "ARR 1.2M (deck p.4) vs MRR 80k x 12 = 960k (data room export, March)",
        "ARR/MRR do not reconcile",
    ]
    return [
        agent(f"agent-{index}", make_flag("ARR/MRR inconsistency", severity, evidence=text))
        for index, (severity, text) in enumerate(zip(severities, evidence, strict=True), 1)
    ]


def test_five_agents_on_one_topic_consolidate_into_one_flag() -> None:
    flags = consolidate(_arr_mrr_run())

    assert len(flags) == 1
    flag = flags[0]
    assert flag.topic == "revenue_metrics"
    assert flag.alert_key == "RED_FLAG::revenue_metrics"
    assert flag.severity is Severity.CRITICAL
    assert flag.detected_by == ("agent-1", "agent-2", "agent-3", "agent-4", "agent-5")
    assert flag.detection_count == 5
    assert flag.evidence == (
        "ARR 1.2M (deck p.4) vs MRR 80k x 12 = 960k (data room export, March)"
    )
    assert len(flag.duplicates) == 5


def test_same_agent_twice_counts_once_in_detected_by() -> None:
    flags = consolidate(
        [
            agent(
                "finance",
                make_flag("Runway below 12 months", Severity.HIGH),
                make_flag("Cash burn too high", Severity.MEDIUM),
            )
        ]
    )

    assert len(flags) == 1
    assert flags[0].detected_by == ("finance",)
    assert len(flags[0].duplicates) == 2


def test_ties_on_text_length_keep_the_first_value() -> None:
    flags = consolidate(
        [
            agent("a", make_flag("High churn", description="first")),
            agent("b", make_flag("Churn risk", description="later")),
        ]
    )

    assert flags[0].description == "first"
    assert flags[0].title == "High churn"


def test_output_is_ordered_by_severity_then_agreement() -> None:
    flags = consolidate(
        [
            agent("a", make_flag("ESOP pool too small", Severity.LOW)),
            agent("b", make_flag("High churn", Severity.HIGH), make_flag("Runway short")),
            agent("c", make_flag("Runway short", Severity.HIGH)),
        ]
    )

    assert [flag.topic for flag in flags] == ["burn_rate", "churn", "esop"]


def test_consolidation_is_idempotent() -> None:
    first = consolidate(
        [
            *_arr_mrr_run(),
            agent("legal", make_flag("Patent ownership unclear", Severity.HIGH)),
            agent("agent-1", make_flag("High churn", Severity.LOW)),
        ]
    )

    assert consolidate(flatten(first)) == first


def test_adding_a_stronger_flag_never_lowers_severity() -> None:
    base = consolidate([agent("a", make_flag("High churn", Severity.HIGH))])
    more = consolidate(
        [
            agent("a", make_flag("High churn", Severity.HIGH)),
            agent("b", make_flag("Churn rising", Severity.LOW)),
        ]
    )

    assert more[0].severity.rank <= base[0].severity.rank


def test_empty_input_yields_empty_output() -> None:
    assert consolidate([]) == []
    summary = summarize([])
    assert summary.total_raw == 0
    assert summary.dedup_rate == 0.0


def test_summary_reports_dedup_rate_and_severities() -> None:
    run = _arr_mrr_run()
    flags = consolidate(run)

    summary = summarize(flags, raw_count=5)

    assert summary.total_consolidated == 1
    assert summary.dedup_rate == 0.8
    assert summary.by_severity == {"CRITICAL": 1, "HIGH": 0, "MEDIUM": 0, "LOW": 0}
    assert summarize(flags).total_raw == 5
