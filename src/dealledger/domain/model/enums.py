"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class FactCategory(StrEnum):
    FINANCIAL = "FINANCIAL"
    TEAM = "TEAM"
    MARKET = "MARKET"
    PRODUCT = "PRODUCT"
    LEGAL = "LEGAL"
    COMPETITION = "COMPETITION"
    TRACTION = "TRACTION"
    OTHER = "OTHER"

    @classmethod
    def from_fact_key(cls, fact_key: str) -> FactCategory:
        prefix = fact_key.split(".", 1)[0].strip().upper()
        try:
            return cls(prefix)
        except ValueError:
            return cls.OTHER


class FactEventType(StrEnum):
    """Lifecycle of one ledger row: CREATED until replaced or tombstoned."""

    CREATED = "CREATED"
    SUPERSEDED = "SUPERSEDED"
    DELETED = "DELETED"


class FactSource(StrEnum):
    """Known producers. Agent identifiers outside this list are accepted as plain strings."""

    DATA_ROOM = "DATA_ROOM"
    FINANCIAL_MODEL = "FINANCIAL_MODEL"
    FOUNDER_RESPONSE = "FOUNDER_RESPONSE"
    PITCH_DECK = "PITCH_DECK"
    CONTEXT_ENGINE = "CONTEXT_ENGINE"
    BA_OVERRIDE = "BA_OVERRIDE"


BA_OVERRIDE: Final[str] = FactSource.BA_OVERRIDE.value
OVERRIDE_CONFIDENCE: Final[int] = 100


class ReviewStatus(StrEnum):
    OPEN = "OPEN"
    CONSUMED = "CONSUMED"


class ReviewDecision(StrEnum):
    ACCEPT_NEW = "ACCEPT_NEW"
    KEEP_EXISTING = "KEEP_EXISTING"
    OVERRIDE = "OVERRIDE"


class Severity(StrEnum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """Sort rank, 0 is the strongest."""
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, raw: str | None) -> Severity:
        """Read a severity label; unknown or missing labels count as MEDIUM."""
        if raw is None:
            return cls.MEDIUM
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return cls.MEDIUM


_SEVERITY_RANK: Final[dict[Severity, int]] = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


def max_severity(a: Severity, b: Severity) -> Severity:
    """Return the stronger severity; ``a`` wins ties."""
    return a if a.rank <= b.rank else b


class AlertType(StrEnum):
    RED_FLAG = "RED_FLAG"
    DEVILS_ADVOCATE = "DEVILS_ADVOCATE"
    CONDITIONS = "CONDITIONS"


class ResolutionStatus(StrEnum):
    RESOLVED = "RESOLVED"
    ACCEPTED = "ACCEPTED"
