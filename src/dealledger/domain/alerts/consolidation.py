"""Merge overlapping red flags from several agents into one alert per topic."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dealledger.domain.model import (
    AgentRedFlags,
    ConsolidatedFlag,
    FlagInstance,
    RedFlag,
    Severity,
    max_severity,
)

from .keys import red_flag_alert_key
from .topics import DEFAULT_TOPIC_STRATEGY, TopicStrategy

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


def _longer(current: str, incoming: str) -> str:
    # strictly longer wins so the first seen value survives ties
    return incoming if len(incoming.strip()) > len(current.strip()) else current


@dataclass(slots=True)
class _TopicGroup:
    topic: str
    severity: Severity
    title: str = ""
    category: str = ""
    description: str = ""
    evidence: str = ""
    impact: str = ""
    question: str = ""
    detected_by: list[str] = field(default_factory=list[str])
    duplicates: list[FlagInstance] = field(default_factory=list[FlagInstance])

    def absorb(self, agent_name: str, flag: RedFlag) -> None:
        self.severity = max_severity(self.severity, flag.severity)
        self.title = _longer(self.title, flag.title)
        self.category = _longer(self.category, flag.category)
        self.description = _longer(self.description, flag.description)
        self.evidence = _longer(self.evidence, flag.evidence)
        self.impact = _longer(self.impact, flag.impact)
        self.question = _longer(self.question, flag.question)
        if agent_name not in self.detected_by:
            self.detected_by.append(agent_name)
        self.duplicates.append(FlagInstance(agent_name=agent_name, flag=flag))

    def freeze(self) -> ConsolidatedFlag:
        return ConsolidatedFlag(
            topic=self.topic,
            alert_key=red_flag_alert_key(self.topic),
            severity=self.severity,
            title=self.title,
            category=self.category,
            description=self.description,
            evidence=self.evidence,
            impact=self.impact,
            question=self.question,
            detected_by=tuple(self.detected_by),
            duplicates=tuple(self.duplicates),
        )


def _sort_key(flag: ConsolidatedFlag) -> tuple[int, int, str]:
    return (flag.severity.rank, -flag.detection_count, flag.topic)


def consolidate(
    per_agent_red_flags: Iterable[AgentRedFlags],
    *,
    strategy: TopicStrategy = DEFAULT_TOPIC_STRATEGY,
) -> list[ConsolidatedFlag]:
    """Group raw flags by inferred topic and merge each group.

    Severity is the maximum seen, text fields keep the longest non-empty
    value (first seen on ties), ``detected_by`` is the ordered set of agents,
    and every raw flag is kept in ``duplicates``. Output is sorted by severity,
    then by how many agents agree, then by topic.
    """

    groups: dict[str, _TopicGroup] = {}
    for agent in per_agent_red_flags:
        for flag in agent.red_flags:
            topic = strategy.infer_topic(flag.title, flag.category or None)
            group = groups.get(topic)
            if group is None:
                group = groups[topic] = _TopicGroup(topic=topic, severity=flag.severity)
            group.absorb(agent.agent_name, flag)

    return sorted((group.freeze() for group in groups.values()), key=_sort_key)


def flatten(flags: Iterable[ConsolidatedFlag]) -> list[AgentRedFlags]:
    """Rebuild per-agent input from ``duplicates``, preserving the order within each topic."""

    flattened: list[AgentRedFlags] = []
    for consolidated in flags:
        for instance in consolidated.duplicates:
            if flattened and flattened[-1].agent_name == instance.agent_name:
                previous = flattened[-1]
                flattened[-1] = AgentRedFlags(
                    agent_name=previous.agent_name,
                    red_flags=(*previous.red_flags, instance.flag),
                )
            else:
                flattened.append(
                    AgentRedFlags(agent_name=instance.agent_name, red_flags=(instance.flag,))
                )
    return flattened


@dataclass(slots=True, frozen=True)
class ConsolidationSummary:
    total_raw: int
    total_consolidated: int
    dedup_rate: float
    by_severity: dict[str, int]


def summarize(
    flags: Sequence[ConsolidatedFlag],
    raw_count: int | None = None,
) -> ConsolidationSummary:
    total_raw = (
        raw_count if raw_count is not None else sum(len(flag.duplicates) for flag in flags)
    )
    by_severity = {severity.value: 0 for severity in Severity}
    for flag in flags:
        by_severity[flag.severity.value] += 1
    dedup_rate = round(1 - len(flags) / total_raw, 2) if total_raw > 0 else 0.0
    return ConsolidationSummary(
        total_raw=total_raw,
        total_consolidated=len(flags),
        dedup_rate=dedup_rate,
        by_severity=by_severity,
    )
