"""create users, clubs and memberships

Revision ID: 0001
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        sa.Column("first_name", sa.VARCHAR(), nullable=False),
        sa.Column("last_name", sa.VARCHAR(), nullable=False, server_default=""),
        sa.Column("email", sa.VARCHAR(), nullable=False),
        sa.Column("phone", sa.VARCHAR(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_last_login", "users", ["last_login"])

    op.create_table(
        "clubs",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        sa.Column("name", sa.VARCHAR(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_clubs_created_at", "clubs", ["created_at"])

    op.create_table(
        "club_members",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        sa.Column("club_id", sa.VARCHAR(), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("user_id", sa.VARCHAR(), sa.ForeignKey("users.id"), nullable=False),
        _timestamp("joined_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_club_members_club_id", "club_members", ["club_id"])
    op.create_index("ix_club_members_user_id", "club_members", ["user_id"])

    op.create_table(
        "feedbacks",
        sa.Column("id", sa.VARCHAR(), nullable=False),
        sa.Column("user_id", sa.VARCHAR(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("club_id", sa.VARCHAR(), sa.ForeignKey("clubs.id"), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_feedbacks_created_at", "feedbacks", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_feedbacks_created_at", table_name="feedbacks")
    op.drop_table("feedbacks")
    op.drop_index("ix_club_members_user_id", table_name="club_members")
    op.drop_index("ix_club_members_club_id", table_name="club_members")
    op.drop_table("club_members")
    op.drop_index("ix_clubs_created_at", table_name="clubs")
    op.drop_table("clubs")
    op.drop_index("ix_users_last_login", table_name="users")
    op.drop_table("users")
