from __future__ import annotations

import pytest

from dealledger.domain.alerts import (
    alert_type_for_key,
    conditions_alert_key,
    devils_advocate_alert_key,
    red_flag_alert_key,
    text_digest,
)
from dealledger.domain.errors import ValidationError
from dealledger.domain.model import AlertType


def test_red_flag_keys_are_topic_based() -> None:
    assert red_flag_alert_key("revenue_metrics") == "RED_FLAG::revenue_metrics"


def test_text_keys_ignore_case_and_whitespace() -> None:
    first = devils_advocate_alert_key("objection", "  Market   too SMALL ")
    second = devils_advocate_alert_key("objection", "market too small")

    assert first == second
    assert first == f"DEVILS_ADVOCATE::objection::{text_digest('market too small')}"
    assert len(text_digest("anything")) == 16


def test_conditions_key_prefix() -> None:
    key = conditions_alert_key("precedent", "Signed customer LOI")

    assert alert_type_for_key(key) is AlertType.CONDITIONS


def test_unknown_prefix_is_rejected() -> None:
    with pytest.raises(ValidationError) as exc:
        alert_type_for_key("WARNING::something")

    assert exc.value.field == "alertKey"


def test_blank_inputs_are_rejected() -> None:
    with pytest.raises(ValidationError):
        red_flag_alert_key(" ")
    with pytest.raises(ValidationError):
        devils_advocate_alert_key("objection", "")
