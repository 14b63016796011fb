"""Fact reconciliation: projection, contradiction detection and review resolution."""

from __future__ import annotations

from .detection import (
    Accept,
    AcceptReason,
    Decision,
    Reject,
    Significance,
    classify_difference,
    describe_contradiction,
    evaluate,
    relative_difference,
)
from .projection import next_event_timestamp, project, project_all
from .resolution import ResolutionPlan, build_override_event, plan_resolution, read_override_value
from .summary import FactSummary, summarize_facts

__all__ = [
    "Accept",
    "AcceptReason",
    "Decision",
    "FactSummary",
    "Reject",
    "ResolutionPlan",
    "Significance",
    "build_override_event",
    "classify_difference",
    "describe_contradiction",
    "evaluate",
    "next_event_timestamp",
    "plan_resolution",
    "project",
    "project_all",
    "read_override_value",
    "relative_difference",
    "summarize_facts",
]
