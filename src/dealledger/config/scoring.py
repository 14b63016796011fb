"""Severity credits used by the adjusted score."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from dealledger.domain.alerts import DEFAULT_SEVERITY_CREDITS

from .env import optional_int_env

if TYPE_CHECKING:
    from collections.abc import Mapping

CREDIT_ENV_PREFIX: Final[str] = "DEALLEDGER_CREDIT_"


@dataclass(frozen=True, slots=True)
class ScoringConfig:
    credits: Mapping[str, int]


def get_scoring_config() -> ScoringConfig:
    """Start from the default credits and apply ``DEALLEDGER_CREDIT_<SEVERITY>`` overrides."""

    credits = dict(DEFAULT_SEVERITY_CREDITS)
    for severity in DEFAULT_SEVERITY_CREDITS:
        override = optional_int_env(f"{CREDIT_ENV_PREFIX}{severity}", minimum=0)
        if override is not None:
            credits[severity] = override
    return ScoringConfig(credits=MappingProxyType(credits))
