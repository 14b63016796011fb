"""Initial ledger schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

LIVE_EVENT_PREDICATE = "event_type = 'CREATED'"

_CATEGORIES = (
    "FINANCIAL",
    "TEAM",
    "MARKET",
    "PRODUCT",
    "LEGAL",
    "COMPETITION",
    "TRACTION",
    "OTHER",
)


def _enum(*values: str, name: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False)


def upgrade() -> None:
    op.create_table(
        "deal",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_deal")),
    )
    op.create_index(op.f("ix_deal_owner_id"), "deal", ["owner_id"], unique=False)

    op.create_table(
        "fact_event",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("deal_id", sa.Uuid(), nullable=False),
        sa.Column("fact_key", sa.String(length=255), nullable=False),
        sa.Column("category", _enum(*_CATEGORIES, name="factcategory"), nullable=False),
        sa.Column("value", sa.JSON(), nullable=False),
        sa.Column("display_value", sa.Text(), nullable=False),
        sa.Column("unit", sa.String(length=64), nullable=True),
        sa.Column("source", sa.String(length=128), nullable=False),
        sa.Column("source_confidence", sa.Integer(), nullable=False),
        sa.Column(
            "event_type",
            _enum("CREATED", "SUPERSEDED", "DELETED", name="facteventtype"),
            nullable=False,
        ),
        sa.Column("supersedes_event_id", sa.Uuid(), nullable=True),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["deal_id"], ["deal.id"], name=op.f("fk_fact_event_deal_id_deal"), ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["supersedes_event_id"],
            ["fact_event.id"],
            name=op.f("fk_fact_event_supersedes_event_id_fact_event"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_fact_event")),
    )
    op.create_index(
        "ix_fact_event_deal_key",
        "fact_event",
        ["deal_id", "fact_key", "created_at"],
        unique=False,
    )
    op.create_index(
        "uq_fact_event_live",
        "fact_event",
        ["deal_id", "fact_key"],
        unique=True,
        sqlite_where=sa.text(LIVE_EVENT_PREDICATE),
        postgresql_where=sa.text(LIVE_EVENT_PREDICATE),
    )

    op.create_table(
        "pending_review",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("deal_id", sa.Uuid(), nullable=False),
        sa.Column("fact_key", sa.String(length=255), nullable=False),
        sa.Column("category", _enum(*_CATEGORIES, name="factcategory"), nullable=False),
        sa.Column("new_value", sa.JSON(), nullable=False),
        sa.Column("new_display_value", sa.Text(), nullable=False),
        sa.Column("new_source", sa.String(length=128), nullable=False),
        sa.Column("new_confidence", sa.Integer(), nullable=False),
        sa.Column("existing_event_id", sa.Uuid(), nullable=False),
        sa.Column("existing_value", sa.JSON(), nullable=False),
        sa.Column("existing_display_value", sa.Text(), nullable=False),
        sa.Column("existing_source", sa.String(length=128), nullable=False),
        sa.Column("existing_confidence", sa.Integer(), nullable=False),
        sa.Column("contradiction_reason", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", _enum("OPEN", "CONSUMED", name="reviewstatus"), nullable=False),
        sa.Column(
            "decision",
            _enum("ACCEPT_NEW", "KEEP_EXISTING", "OVERRIDE", name="reviewdecision"),
            nullable=True,
        ),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_by", sa.String(length=255), nullable=True),
        sa.Column("resolution_reason", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["deal_id"],
            ["deal.id"],
            name=op.f("fk_pending_review_deal_id_deal"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["existing_event_id"],
            ["fact_event.id"],
            name=op.f("fk_pending_review_existing_event_id_fact_event"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_pending_review")),
    )
    op.create_index(
        "ix_pending_review_deal_status",
        "pending_review",
        ["deal_id", "status", "fact_key"],
        unique=False,
    )

    op.create_table(
        "alert_resolution",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("deal_id", sa.Uuid(), nullable=False),
        sa.Column("alert_key", sa.String(length=255), nullable=False),
        sa.Column(
            "alert_type",
            _enum("RED_FLAG", "DEVILS_ADVOCATE", "CONDITIONS", name="alerttype"),
            nullable=False,
        ),
        sa.Column("status", _enum("RESOLVED", "ACCEPTED", name="resolutionstatus"), nullable=False),
        sa.Column("justification", sa.Text(), nullable=False),
        sa.Column("alert_title", sa.Text(), nullable=False),
        sa.Column("alert_severity", sa.String(length=32), nullable=True),
        sa.Column("alert_category", sa.String(length=128), nullable=True),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["deal_id"],
            ["deal.id"],
            name=op.f("fk_alert_resolution_deal_id_deal"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_alert_resolution")),
        sa.UniqueConstraint("deal_id", "alert_key", name="uq_alert_resolution_deal_key"),
    )


def downgrade() -> None:
    op.drop_table("alert_resolution")
    op.drop_index("ix_pending_review_deal_status", table_name="pending_review")
    op.drop_table("pending_review")
    op.drop_index("uq_fact_event_live", table_name="fact_event")
    op.drop_index("ix_fact_event_deal_key", table_name="fact_event")
    op.drop_table("fact_event")
    op.drop_index(op.f("ix_deal_owner_id"), table_name="deal")
    op.drop_table("deal")
