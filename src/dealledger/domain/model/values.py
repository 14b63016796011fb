"""Fact values as a tagged union.

Each variant carries a ``kind`` discriminator so comparisons between values of
different kinds are always unequal (``true`` is not ``1``).
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final, Literal

from dealledger.domain.errors import ValidationError

type JsonScalar = str | int | float | bool
type JsonValue = JsonScalar | list[JsonValue] | dict[str, JsonValue] | None


@dataclass(slots=True, frozen=True)
class NumberValue:
    amount: int | float
    kind: Literal["number"] = "number"

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int | float):
            raise ValidationError("number value must be an int or float", field="value")
        if isinstance(self.amount, float) and not math.isfinite(self.amount):
            raise ValidationError("number value must be finite", field="value")


@dataclass(slots=True, frozen=True)
class TextValue:
    text: str
    kind: Literal["text"] = "text"


@dataclass(slots=True, frozen=True)
class BooleanValue:
    flag: bool
    kind: Literal["boolean"] = "boolean"


@dataclass(slots=True, frozen=True)
class TextListValue:
    items: tuple[str, ...]
    kind: Literal["list"] = "list"

    def __post_init__(self) -> None:
        if not all(isinstance(item, str) for item in self.items):
            raise ValidationError("list values may only hold strings", field="value")


@dataclass(slots=True, frozen=True, eq=False)
class MapValue:
    """Structured JSON object. Equality uses a canonical JSON rendering."""

    entries: Mapping[str, JsonValue]
    kind: Literal["map"] = "map"
    _canonical: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not all(isinstance(key, str) for key in self.entries):
            raise ValidationError("map keys must be strings", field="value")
        try:
            canonical = json.dumps(
                _normalize(self.entries),
                sort_keys=True,
                separators=(",", ":"),
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"map value is not JSON: {exc}", field="value") from exc
        object.__setattr__(self, "_canonical", canonical)

    @property
    def canonical(self) -> str:
        return self._canonical

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MapValue):
            return NotImplemented
        return self._canonical == other._canonical

    def __hash__(self) -> int:
        return hash(("map", self._canonical))


type FactValue = NumberValue | TextValue | BooleanValue | TextListValue | MapValue

_FACT_VALUE_TYPES: Final = (NumberValue, TextValue, BooleanValue, TextListValue, MapValue)


def _normalize(raw: object) -> object:
    # integral floats compare equal to ints inside maps, as they do at the top level
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, Mapping):
        return {key: _normalize(value) for key, value in raw.items()}
    if isinstance(raw, list | tuple):
        return [_normalize(item) for item in raw]
    return raw


def fact_value_from_json(raw: object) -> FactValue:
    """Convert a JSON-compatible payload into a fact value."""

    if isinstance(raw, _FACT_VALUE_TYPES):
        return raw
    if raw is None:
        raise ValidationError("value is required", field="value")
    if isinstance(raw, bool):
        return BooleanValue(raw)
    if isinstance(raw, int | float):
        return NumberValue(raw)
    if isinstance(raw, str):
        return TextValue(raw)
    if isinstance(raw, list | tuple):
        return TextListValue(tuple(raw))  # pyright: ignore[reportUnknownArgumentType]
    if isinstance(raw, Mapping):
        return MapValue(dict(raw))  # pyright: ignore[reportUnknownArgumentType]
    raise ValidationError(f"unsupported value type: {type(raw).__name__}", field="value")


def fact_value_to_json(value: FactValue) -> JsonValue:
    if isinstance(value, NumberValue):
        return value.amount
    if isinstance(value, TextValue):
        return value.text
    if isinstance(value, BooleanValue):
        return value.flag
    if isinstance(value, TextListValue):
        return list(value.items)
    return dict(value.entries)


def values_equal(left: FactValue, right: FactValue) -> bool:
    """Structural equality across the union; different kinds never match."""

    return left.kind == right.kind and left == right


def render_display_value(value: FactValue) -> str:
    if isinstance(value, NumberValue):
        amount = value.amount
        if isinstance(amount, float) and amount.is_integer() and abs(amount) < 1e15:
            return f"{int(amount):,}"
        return f"{amount:,}"
    if isinstance(value, TextValue):
        return value.text
    if isinstance(value, BooleanValue):
        return "true" if value.flag else "false"
    if isinstance(value, TextListValue):
        return ", ".join(value.items)
    return json.dumps(dict(value.entries), ensure_ascii=False, separators=(",", ":"))


_GROUPED_NUMBER: Final = re.compile(r"^[+-]?\d{1,3}(?:([, _])\d{3})(?:\1\d{3})*(?:\.\d+)?$")
_MISSING: Final = object()


def parse_display_input(text: str) -> FactValue:
    """Parse a human-entered value.

    JSON literals are read structurally (``true``, ``42``, ``["a", "b"]``,
    ``{"k": 1}``); numbers written with thousands separators (``1,200,000``)
    are read as numbers; anything else is kept as text.
    """

    stripped = text.strip()
    if not stripped:
        raise ValidationError("value must not be blank", field="value")

    try:
        decoded: object = json.loads(stripped)
    except ValueError:
        decoded = _MISSING
    if decoded is not _MISSING and decoded is not None:
        try:
            return fact_value_from_json(decoded)
        except ValidationError:
            pass

    grouped = _GROUPED_NUMBER.match(stripped)
    if grouped is not None:
        digits = stripped.replace(grouped.group(1), "")
        return NumberValue(float(digits) if "." in digits else int(digits))

    return TextValue(stripped)


def numeric_amount(value: FactValue) -> float | None:
    """Best-effort numeric reading used to describe contradictions."""

    if isinstance(value, NumberValue):
        return float(value.amount)
    if isinstance(value, MapValue):
        for key in ("amount", "value"):
            nested = value.entries.get(key)
            if isinstance(nested, int | float) and not isinstance(nested, bool):
                return float(nested)
    return None
