from __future__ import annotations

import pytest

from dealledger.domain.errors import ValidationError
from dealledger.domain.model import (
    BooleanValue,
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


def test_values_of_different_kinds_never_match() -> None:
    assert not values_equal(BooleanValue(flag=True), NumberValue(1))
    assert not values_equal(TextValue("1"), NumberValue(1))


def test_integral_numbers_compare_equal_across_int_and_float() -> None:
    assert values_equal(NumberValue(1_000_000), NumberValue(1_000_000.0))


def test_map_equality_ignores_key_order() -> None:
    left = MapValue({"amount": 2, "currency": "EUR"})
    right = MapValue({"currency": "EUR", "amount": 2.0})

    assert values_equal(left, right)
    assert hash(left) == hash(right)


def test_from_json_builds_tagged_variants() -> None:
    assert fact_value_from_json(True) == BooleanValue(flag=True)
    assert fact_value_from_json(12) == NumberValue(12)
    assert fact_value_from_json("Paris") == TextValue("Paris")
    assert fact_value_from_json(["SaaS", "B2B"]) == TextListValue(("SaaS", "B2B"))
    assert fact_value_to_json(fact_value_from_json({"a": 1})) == {"a": 1}


@pytest.mark.parametrize("raw", [None, object(), float("nan"), [1, 2]])
def test_from_json_rejects_unsupported_values(raw: object) -> None:
    with pytest.raises(ValidationError) as exc:
        fact_value_from_json(raw)

    assert exc.value.field == "value"


def test_render_display_value_groups_thousands() -> None:
    assert render_display_value(NumberValue(1_200_000)) == "1,200,000"
    assert render_display_value(NumberValue(2_000_000.0)) == "2,000,000"
    assert render_display_value(BooleanValue(flag=False)) == "false"
    assert render_display_value(TextListValue(("a", "b"))) == "a, b"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("42", NumberValue(42)),
        ("1,200,000", NumberValue(1_200_000)),
        ("1 200 000.5", NumberValue(1_200_000.5)),
        ("true", BooleanValue(flag=True)),
        ('["a", "b"]', TextListValue(("a", "b"))),
        ("€2.5M", TextValue("€2.5M")),
        ("  Berlin ", TextValue("Berlin")),
    ],
)
def test_parse_display_input(text: str, expected: object) -> None:
    assert parse_display_input(text) == expected


def test_parse_display_input_rejects_blank() -> None:
    with pytest.raises(ValidationError):
        parse_display_input("   ")
