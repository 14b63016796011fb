"""Canonical fact keys with their expected value type, unit and label."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from .enums import FactCategory


class FactValueType(StrEnum):
    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    NUMBER = "number"
    STRING = "string"
    DATE = "date"
    BOOLEAN = "boolean"
    ARRAY = "array"
    ENUM = "enum"

    @property
    def is_numeric(self) -> bool:
        return self in {FactValueType.CURRENCY, FactValueType.PERCENTAGE, FactValueType.NUMBER}


@dataclass(slots=True, frozen=True)
class FactKeyDefinition:
    key: str
    value_type: FactValueType
    description: str
    unit: str | None = None
    is_temporal: bool = False

    @property
    def category(self) -> FactCategory:
        return FactCategory.from_fact_key(self.key)


def _define(
    key: str,
    value_type: FactValueType,
    description: str,
    *,
    unit: str | None = None,
    is_temporal: bool = False,
) -> tuple[str, FactKeyDefinition]:
    return key, FactKeyDefinition(
        key=key,
        value_type=value_type,
        description=description,
        unit=unit,
        is_temporal=is_temporal,
    )


_C = FactValueType.CURRENCY
_P = FactValueType.PERCENTAGE
_N = FactValueType.NUMBER
_S = FactValueType.STRING

FACT_KEYS: Final[dict[str, FactKeyDefinition]] = dict(
    [
        # financial
        _define("financial.arr", _C, "Annual Recurring Revenue", unit="EUR", is_temporal=True),
        _define("financial.mrr", _C, "Monthly Recurring Revenue", unit="EUR", is_temporal=True),
        _define("financial.revenue", _C, "Total Revenue", unit="EUR", is_temporal=True),
        _define("financial.revenue_growth_yoy", _P, "Year-over-year revenue growth"),
        _define("financial.revenue_growth_mom", _P, "Month-over-month revenue growth"),
        _define("financial.burn_rate", _C, "Monthly burn rate", unit="EUR/month", is_temporal=True),
        _define("financial.runway_months", _N, "Months of runway remaining", is_temporal=True),
        _define("financial.gross_margin", _P, "Gross margin percentage"),
        _define("financial.ebitda", _C, "EBITDA", unit="EUR"),
        _define("financial.cash_position", _C, "Cash position", unit="EUR", is_temporal=True),
        _define("financial.valuation_pre", _C, "Pre-money valuation", unit="EUR"),
        _define("financial.valuation_post", _C, "Post-money valuation", unit="EUR"),
        _define("financial.amount_raising", _C, "Amount being raised", unit="EUR"),
        _define("financial.dilution_current_round", _P, "Dilution of the current round"),
        # traction
        _define("traction.churn_monthly", _P, "Monthly churn rate"),
        _define("traction.nrr", _P, "Net revenue retention"),
        _define("traction.cac", _C, "Customer acquisition cost", unit="EUR"),
        _define("traction.ltv", _C, "Customer lifetime value", unit="EUR"),
        _define("traction.ltv_cac_ratio", _N, "LTV / CAC ratio"),
        _define("traction.customers_count", _N, "Number of paying customers", is_temporal=True),
        _define("traction.users_count", _N, "Number of users", is_temporal=True),
        # team
        _define("team.size", _N, "Headcount", is_temporal=True),
        _define("team.founders_count", _N, "Number of founders"),
        _define("team.ceo.name", _S, "CEO name"),
        _define("team.advisors", FactValueType.ARRAY, "Advisors"),
        _define("team.vesting_months", _N, "Founder vesting period (months)"),
        _define("team.cliff_months", _N, "Founder cliff (months)"),
        # market
        _define("market.tam", _C, "Total addressable market", unit="EUR"),
        _define("market.sam", _C, "Serviceable addressable market", unit="EUR"),
        _define("market.cagr", _P, "Market CAGR"),
        _define("market.geography_primary", _S, "Primary geography"),
        _define("market.b2b_or_b2c", FactValueType.ENUM, "B2B or B2C"),
        # product
        _define("product.name", _S, "Product name"),
        _define("product.stage", FactValueType.ENUM, "Product stage"),
        _define("product.tech_stack", FactValueType.ARRAY, "Technology stack"),
        _define("product.ip_patents_count", _N, "Number of patents"),
        # competition
        _define("competition.main_competitor", _S, "Main competitor"),
        _define("competition.competitors_list", FactValueType.ARRAY, "Known competitors"),
        # legal
        _define("legal.incorporation_country", _S, "Country of incorporation"),
        _define("legal.incorporation_date", FactValueType.DATE, "Incorporation date"),
        _define("legal.has_pending_litigation", FactValueType.BOOLEAN, "Pending litigation"),
    ]
)


def get_fact_key_definition(fact_key: str) -> FactKeyDefinition | None:
    return FACT_KEYS.get(fact_key)


def fact_key_label(fact_key: str) -> str:
    """Human label for a key, e.g. ``financial.burn_rate`` -> ``Financial - Burn Rate``."""

    definition = FACT_KEYS.get(fact_key)
    if definition is not None:
        return definition.description
    parts = (part.replace("_", " ").strip().title() for part in fact_key.split("."))
    return " - ".join(part for part in parts if part)
