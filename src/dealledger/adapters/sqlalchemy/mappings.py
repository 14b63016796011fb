"""SQLAlchemy mapping metadata for the ledger domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Any, Final

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
    text,
)
from sqlalchemy.orm import configure_mappers

from dealledger.domain.model import (
    AlertResolution,
    AlertType,
    Deal,
    FactCategory,
    FactEvent,
    FactEventType,
    FactValue,
    PendingReview,
    ResolutionStatus,
    ReviewDecision,
    ReviewStatus,
    fact_value_from_json,
    fact_value_to_json,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

LIVE_EVENT_PREDICATE: Final[str] = "event_type = 'CREATED'"


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class FactValueJSON(TypeDecorator[FactValue]):
    """Stores a fact value as its plain JSON payload; the kind is recovered on load."""

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: FactValue | None, dialect: Dialect) -> Any:
        _ = dialect
        if value is None:
            return None
        return fact_value_to_json(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> FactValue | None:
        _ = dialect
        if value is None:
            return None
        return fact_value_from_json(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Tables -----------------------------------------------------------------------

deal_table = Table(
    "deal",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("owner_id", String(255), nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
)

fact_event_table = Table(
    "fact_event",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "deal_id", UUIDColumnType, ForeignKey("deal.id", ondelete="CASCADE"), nullable=False
    ),
    Column("fact_key", String(255), nullable=False),
    Column("category", Enum(FactCategory, native_enum=False), nullable=False),
    Column("value", FactValueJSON(), nullable=False),
    Column("display_value", Text, nullable=False),
    Column("unit", String(64), nullable=True),
    Column("source", String(128), nullable=False),
    Column("source_confidence", Integer, nullable=False),
    Column("event_type", Enum(FactEventType, native_enum=False), nullable=False),
    Column("supersedes_event_id", UUIDColumnType, ForeignKey("fact_event.id"), nullable=True),
    Column("created_by", String(255), nullable=True),
    Column("reason", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_fact_event_deal_key", "deal_id", "fact_key", "created_at"),
    # at most one live event per fact
    Index(
        "uq_fact_event_live",
        "deal_id",
        "fact_key",
        unique=True,
        sqlite_where=text(LIVE_EVENT_PREDICATE),
        postgresql_where=text(LIVE_EVENT_PREDICATE),
    ),
)

pending_review_table = Table(
    "pending_review",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "deal_id", UUIDColumnType, ForeignKey("deal.id", ondelete="CASCADE"), nullable=False
    ),
    Column("fact_key", String(255), nullable=False),
    Column("category", Enum(FactCategory, native_enum=False), nullable=False),
    Column("new_value", FactValueJSON(), nullable=False),
    Column("new_display_value", Text, nullable=False),
    Column("new_source", String(128), nullable=False),
    Column("new_confidence", Integer, nullable=False),
    Column("existing_event_id", UUIDColumnType, ForeignKey("fact_event.id"), nullable=False),
    Column("existing_value", FactValueJSON(), nullable=False),
    Column("existing_display_value", Text, nullable=False),
    Column("existing_source", String(128), nullable=False),
    Column("existing_confidence", Integer, nullable=False),
    Column("contradiction_reason", Text, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("status", Enum(ReviewStatus, native_enum=False), nullable=False),
    Column("decision", Enum(ReviewDecision, native_enum=False), nullable=True),
    Column("resolved_at", UTCDateTime(), nullable=True),
    Column("resolved_by", String(255), nullable=True),
    Column("resolution_reason", Text, nullable=True),
    Index("ix_pending_review_deal_status", "deal_id", "status", "fact_key"),
)

alert_resolution_table = Table(
    "alert_resolution",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "deal_id", UUIDColumnType, ForeignKey("deal.id", ondelete="CASCADE"), nullable=False
    ),
    Column("alert_key", String(255), nullable=False),
    Column("alert_type", Enum(AlertType, native_enum=False), nullable=False),
    Column("status", Enum(ResolutionStatus, native_enum=False), nullable=False),
    Column("justification", Text, nullable=False),
    Column("alert_title", Text, nullable=False),
    Column("alert_severity", String(32), nullable=True),
    Column("alert_category", String(128), nullable=True),
    Column("created_by", String(255), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    UniqueConstraint("deal_id", "alert_key", name="uq_alert_resolution_deal_key"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Deal, deal_table)
    mapper_registry.map_imperatively(FactEvent, fact_event_table)
    mapper_registry.map_imperatively(PendingReview, pending_review_table)
    mapper_registry.map_imperatively(AlertResolution, alert_resolution_table)

    configure_mappers()
    return mapper_registry

