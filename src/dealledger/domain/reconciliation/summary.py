"""Aggregate statistics over a deal's current facts."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dealledger.domain.model import CurrentFact

LOW_CONFIDENCE_THRESHOLD: Final[int] = 70


@dataclass(slots=True, frozen=True)
class FactSummary:
    total: int
    average_confidence: int
    disputed_count: int
    low_confidence_count: int
    by_category: dict[str, int] = field(default_factory=dict[str, int])
    by_source: dict[str, int] = field(default_factory=dict[str, int])


def summarize_facts(facts: Sequence[CurrentFact]) -> FactSummary:
    if not facts:
        return FactSummary(total=0, average_confidence=0, disputed_count=0, low_confidence_count=0)

    by_category = Counter(fact.category.value for fact in facts)
    by_source = Counter(fact.current_source for fact in facts)
    average = round(sum(fact.current_confidence for fact in facts) / len(facts))
    return FactSummary(
        total=len(facts),
        average_confidence=average,
        disputed_count=sum(1 for fact in facts if fact.is_disputed),
        low_confidence_count=sum(
            1 for fact in facts if fact.current_confidence < LOW_CONFIDENCE_THRESHOLD
        ),
        by_category=dict(sorted(by_category.items())),
        by_source=dict(sorted(by_source.items())),
    )
