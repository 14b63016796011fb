"""Deterministic alert keys.

Consolidated red flags are keyed by topic. Devil's-advocate objections and
investment conditions carry no stable topic, so they are keyed by a digest of
their normalised text.
"""

from __future__ import annotations

import hashlib
from typing import Final

from dealledger.domain.errors import ValidationError
from dealledger.domain.model import AlertType

KEY_SEPARATOR: Final[str] = "::"
DIGEST_LENGTH: Final[int] = 16


def normalize_alert_text(text: str) -> str:
    return " ".join(text.lower().split())


def text_digest(text: str) -> str:
    normalized = normalize_alert_text(text)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:DIGEST_LENGTH]


def red_flag_alert_key(topic: str) -> str:
    if not topic.strip():
        raise ValidationError("topic must not be empty", field="topic")
    return f"{AlertType.RED_FLAG.value}{KEY_SEPARATOR}{topic.strip()}"


def _text_alert_key(alert_type: AlertType, kind: str, text: str) -> str:
    if not kind.strip():
        raise ValidationError("kind must not be empty", field="kind")
    if not text.strip():
        raise ValidationError("text must not be empty", field="text")
    return KEY_SEPARATOR.join((alert_type.value, kind.strip(), text_digest(text)))


def devils_advocate_alert_key(kind: str, text: str) -> str:
    return _text_alert_key(AlertType.DEVILS_ADVOCATE, kind, text)


def conditions_alert_key(kind: str, text: str) -> str:
    return _text_alert_key(AlertType.CONDITIONS, kind, text)


def alert_type_for_key(alert_key: str) -> AlertType:
    prefix = alert_key.split(KEY_SEPARATOR, 1)[0]
    try:
        return AlertType(prefix)
    except ValueError:
        raise ValidationError(
            f"alert key {alert_key!r} does not start with a known alert type",
            field="alertKey",
        ) from None
