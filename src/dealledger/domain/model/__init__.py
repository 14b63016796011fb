"""Public domain model surface."""

from __future__ import annotations

from dealledger.domain.model.alerts import (
    AgentRedFlags,
    AlertResolution,
    ConsolidatedFlag,
    FlagInstance,
    RedFlag,
)
from dealledger.domain.model.deal import Deal
from dealledger.domain.model.enums import (
    BA_OVERRIDE,
    OVERRIDE_CONFIDENCE,
    AlertType,
    FactCategory,
    FactEventType,
    FactSource,
    ResolutionStatus,
    ReviewDecision,
    ReviewStatus,
    Severity,
    max_severity,
)
from dealledger.domain.model.fact_keys import (
    FACT_KEYS,
    FactKeyDefinition,
    FactValueType,
    fact_key_label,
    get_fact_key_definition,
)
from dealledger.domain.model.facts import (
    CurrentFact,
    DisputeDetail,
    FactClaim,
    FactEvent,
    PendingReview,
    new_id,
    utc_now,
)
from dealledger.domain.model.values import (
    BooleanValue,
    FactValue,
    MapValue,
    NumberValue,
    TextListValue,
    TextValue,
    fact_value_from_json,
    fact_value_to_json,
    parse_display_input,
    render_display_value,
    values_equal,
)

__all__ = [  # noqa: RUF022
    # enums
    "BA_OVERRIDE",
    "OVERRIDE_CONFIDENCE",
    "AlertType",
    "FactCategory",
    "FactEventType",
    "FactSource",
    "ResolutionStatus",
    "ReviewDecision",
    "ReviewStatus",
    "Severity",
    "max_severity",
    # values
    "BooleanValue",
    "FactValue",
    "MapValue",
    "NumberValue",
    "TextListValue",
    "TextValue",
    "fact_value_from_json",
    "fact_value_to_json",
    "parse_display_input",
    "render_display_value",
    "values_equal",
    # fact keys
    "FACT_KEYS",
    "FactKeyDefinition",
    "FactValueType",
    "fact_key_label",
    "get_fact_key_definition",
    # entities
    "CurrentFact",
    "Deal",
    "DisputeDetail",
    "FactClaim",
    "FactEvent",
    "PendingReview",
    "new_id",
    "utc_now",
    # alerts
    "AgentRedFlags",
    "AlertResolution",
    "ConsolidatedFlag",
    "FlagInstance",
    "RedFlag",
]
