from __future__ import annotations

import pytest

from dealledger.domain.alerts import KeywordTopicStrategy, fold_text, infer_topic


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("ARR/MRR inconsistency", "revenue_metrics"),
        ("Écart entre ARR et MRR", "revenue_metrics"),
        ("High churn among enterprise customers", "churn"),
        ("Founder vesting has no cliff", "vesting"),
        ("ESOP pool too small", "esop"),
        ("Runway below 12 months", "burn_rate"),
        ("Patent ownership unclear", "ip_ownership"),
    ],
)
def test_known_titles_map_to_topics(title: str, expected: str) -> None:
    assert infer_topic(title) == expected


def test_first_matching_pattern_wins() -> None:
    # churn is checked before revenue metrics
    assert infer_topic("Revenue churn accelerating") == "churn"


def test_unmatched_titles_fall_back_to_category_and_slug() -> None:
    assert infer_topic("Unclear hiring roadmap", "product") == "product::unclear_hiring_roadmap"
    assert infer_topic("Unclear hiring roadmap") == "other::unclear_hiring_roadmap"


def test_fallback_slug_is_truncated() -> None:
    topic = infer_topic("x" * 80, "misc")

    assert topic == "misc::" + "x" * 40


def test_fold_text_strips_accents() -> None:
    assert fold_text("Propriété Intellectuelle") == "propriete intellectuelle"


def test_custom_patterns_replace_the_table() -> None:
    strategy = KeywordTopicStrategy(patterns=((r"cap.*table", "cap_table"),))

    assert infer_topic("Messy cap table", "legal", strategy=strategy) == "cap_table"
    assert infer_topic("ARR drop", "financial", strategy=strategy) == "financial::arr_drop"
