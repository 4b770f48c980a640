"""create events and their registrations, attendance and extras

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-01 00:10:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

event_category = postgresql.ENUM(
    "WORKSHOP",
    "SEMINAR",
    "COMPETITION",
    "SOCIAL",
    "VOLUNTEERING",
    "SPORTS",
    "CULTURAL",
    "OTHER",
    name="event_category",
    create_type=False,
)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def _event_fk() -> sa.Column:
    return sa.Column("event_id", sa.VARCHAR(), sa.ForeignKey("events.id"), nullable=False)


def upgrade() -> None:
    event_category.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "events",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        sa.Column("title", sa.VARCHAR(), nullable=False),
        sa.Column("subtitle", sa.VARCHAR(), nullable=True),
        sa.Column("club_id", sa.VARCHAR(), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("category", event_category, nullable=False, server_default="OTHER"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("venue", sa.VARCHAR(), nullable=True),
        sa.Column("cover_image", sa.Text(), nullable=True),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_events_club_id", "events", ["club_id"])
    op.create_index("ix_events_start_date_time", "events", ["start_date_time"])
    op.create_index("ix_events_created_at", "events", ["created_at"])

    op.create_table(
        "event_registrations",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        _event_fk(),
        sa.Column("user_id", sa.VARCHAR(), sa.ForeignKey("users.id"), nullable=False),
        _timestamp("registered_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_event_registrations_event_id", "event_registrations", ["event_id"])

    op.create_table(
        "event_attendances",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        _event_fk(),
        sa.Column("user_id", sa.VARCHAR(), sa.ForeignKey("users.id"), nullable=False),
        _timestamp("attend_time"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_event_attendances_event_id", "event_attendances", ["event_id"])
    op.create_index("ix_event_attendances_attend_time", "event_attendances", ["attend_time"])

    op.create_table(
        "event_agenda_items",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        _event_fk(),
        sa.Column("title", sa.VARCHAR(), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_event_agenda_items_event_id", "event_agenda_items", ["event_id"])

    op.create_table(
        "event_resource_persons",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        _event_fk(),
        sa.Column("name", sa.VARCHAR(), nullable=False),
        sa.Column("designation", sa.VARCHAR(), nullable=True),
        sa.Column("photo", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_event_resource_persons_event_id", "event_resource_persons", ["event_id"])

    op.create_table(
        "event_addons",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        _event_fk(),
        sa.Column("name", sa.VARCHAR(), nullable=False),
        sa.Column("tags", postgresql.ARRAY(sa.Text()), nullable=False, server_default="{}"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_event_addons_event_id", "event_addons", ["event_id"])


def downgrade() -> None:
    for table in (
        "event_addons",
        "event_resource_persons",
        "event_agenda_items",
        "event_attendances",
        "event_registrations",
    ):
        op.drop_index(f"ix_{table}_event_id", table_name=table)
    op.drop_index("ix_event_attendances_attend_time", table_name="event_attendances")
    op.drop_table("event_addons")
    op.drop_table("event_resource_persons")
    op.drop_table("event_agenda_items")
    op.drop_table("event_attendances")
    op.drop_table("event_registrations")
    op.drop_index("ix_events_created_at", table_name="events")
    op.drop_index("ix_events_start_date_time", table_name="events")
    op.drop_index("ix_events_club_id", table_name="events")
    op.drop_table("events")
    event_category.drop(op.get_bind(), checkfirst=True)
