"""Agent payload schemas and their translation into domain objects."""

from __future__ import annotations

from .schema import (
    AgentRedFlagsPayload,
    FactClaimBatchPayload,
    FactClaimPayload,
    RedFlagPayload,
    RedFlagRunPayload,
)
from .translator import (
    load_claims_file,
    load_red_flags_file,
    translate_claim,
    translate_claims,
    translate_red_flag_run,
)

__all__ = [
    "AgentRedFlagsPayload",
    "FactClaimBatchPayload",
    "FactClaimPayload",
    "RedFlagPayload",
    "RedFlagRunPayload",
    "load_claims_file",
    "load_red_flags_file",
    "translate_claim",
    "translate_claims",
    "translate_red_flag_run",
]
