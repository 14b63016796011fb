"""Map free-text red flag titles onto canonical topics."""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

OTHER_CATEGORY: Final[str] = "other"
FALLBACK_SLUG_LENGTH: Final[int] = 40


@runtime_checkable
class TopicStrategy(Protocol):
    """Infer the canonical topic a red flag is about."""

    def infer_topic(self, title: str, category: str | None) -> str: ...


def fold_text(text: str) -> str:
    """Lowercase and strip accents so ``Écart`` and ``ecart`` match the same pattern."""

    decomposed = unicodedata.normalize("NFKD", text.lower())
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]", "_", text)


# Ordered: the first matching pattern wins. Patterns run on folded text.
DEFAULT_TOPIC_PATTERNS: Final[tuple[tuple[str, str], ...]] = (
    (r"churn|attrition|retention", "churn"),
    (r"vesting|cliff", "vesting"),
    (r"esop|pool.*option|stock.*option", "esop"),
    (r"valorisation|valuation|valo|multiple.*arr|multiple.*marche", "valuation"),
    (r"burn.*rate|cash.*burn|runway", "burn_rate"),
    (r"arr|mrr|revenue|chiffre.*affaire|reporting.*financ", "revenue_metrics"),
    (r"unit.*eco|ltv.*cac|cac|ltv", "unit_economics"),
    (r"incoheren|inconsisten|contradict|ecart|divergen", "data_inconsistency"),
    (r"fondateur.*men|mensonge|falsif|integrite", "founder_integrity"),
    (r"ip|propriete.*intellectuel|brevet|patent", "ip_ownership"),
    (r"concurrent|competi", "competition"),
    (r"marche|market.*size|tam|sam", "market_size"),
    (r"equipe|team.*size|fondateur.*solo", "team"),
    (r"dilution", "dilution"),
    (r"dette.*tech|technical.*debt", "tech_debt"),
    (r"concentration.*client|customer.*concentration", "customer_concentration"),
    (r"legal|juridique|rgpd|gdpr", "legal_compliance"),
    (r"scalab|non.*scalable|modele.*service", "scalability"),
    (r"gtm|go.*to.*market|croissance|growth", "gtm"),
    (r"marge|margin", "margin"),
    (r"structure.*invest|toxique|ratchet|liquidat", "deal_structure"),
)


class KeywordTopicStrategy:
    """Keyword table lookup with a ``<category>::<slug>`` fallback."""

    def __init__(self, patterns: Sequence[tuple[str, str]] = DEFAULT_TOPIC_PATTERNS) -> None:
        self._patterns = tuple((re.compile(pattern), topic) for pattern, topic in patterns)

    def infer_topic(self, title: str, category: str | None) -> str:
        folded = fold_text(title)
        for pattern, topic in self._patterns:
            if pattern.search(folded):
                return topic
        prefix = category.strip() if category and category.strip() else OTHER_CATEGORY
        return f"{prefix}::{_slug(folded[:FALLBACK_SLUG_LENGTH])}"


DEFAULT_TOPIC_STRATEGY: Final[TopicStrategy] = KeywordTopicStrategy()


def infer_topic(
    title: str,
    category: str | None = None,
    *,
    strategy: TopicStrategy = DEFAULT_TOPIC_STRATEGY,
) -> str:
    return strategy.infer_topic(title, category)
