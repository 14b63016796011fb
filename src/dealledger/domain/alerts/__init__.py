"""Alert consolidation, resolution keys and score adjustment."""

from __future__ import annotations

from .consolidation import ConsolidationSummary, consolidate, flatten, summarize
from .keys import (
    alert_type_for_key,
    conditions_alert_key,
    devils_advocate_alert_key,
    normalize_alert_text,
    red_flag_alert_key,
    text_digest,
)
from .resolutions import (
    ResolutionCounts,
    ResolutionRequest,
    apply_resolution,
    count_resolutions,
)
from .scoring import (
    DEFAULT_SEVERITY_CREDITS,
    AdjustedScore,
    ScoreAdjustment,
    compute_adjusted_score,
)
from .topics import (
    DEFAULT_TOPIC_PATTERNS,
    KeywordTopicStrategy,
    TopicStrategy,
    fold_text,
    infer_topic,
)

__all__ = [
    "DEFAULT_SEVERITY_CREDITS",
    "DEFAULT_TOPIC_PATTERNS",
    "AdjustedScore",
    "ConsolidationSummary",
    "KeywordTopicStrategy",
    "ResolutionCounts",
    "ResolutionRequest",
    "ScoreAdjustment",
    "TopicStrategy",
    "alert_type_for_key",
    "apply_resolution",
    "compute_adjusted_score",
    "conditions_alert_key",
    "consolidate",
    "count_resolutions",
    "devils_advocate_alert_key",
    "flatten",
    "fold_text",
    "infer_topic",
    "normalize_alert_text",
    "red_flag_alert_key",
    "summarize",
    "text_digest",
]
