"""Initial schema: neighborhoods, users, challenges, reports, rate_limit_events

Revision ID: 5c2e7a9d1b40
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c2e7a9d1b40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the four domain tables and the throttle log."""
    op.create_table(
        "neighborhoods",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False, unique=True),
        sa.Column(
            "neighborhood_id",
            sa.Integer(),
            sa.ForeignKey("neighborhoods.id"),
            nullable=False,
        ),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index(
        "ix_users_neighborhood_role", "users", ["neighborhood_id", "role"]
    )

    op.create_table(
        "challenges",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("start_date", sa.String(10)),
        sa.Column("end_date", sa.String(10)),
        sa.Column("points", sa.Integer(), nullable=False),
    )

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column(
            "neighborhood_id",
            sa.Integer(),
            sa.ForeignKey("neighborhoods.id"),
            nullable=False,
        ),
        sa.Column("date", sa.String(10), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("verified_by", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column("organic", sa.Float()),
        sa.Column("plastic", sa.Float()),
        sa.Column("electronic", sa.Float()),
        sa.Column("other", sa.Float()),
        sa.Column("challenge_id", sa.Integer(), sa.ForeignKey("challenges.id")),
        sa.UniqueConstraint("user_id", "date", name="uq_reports_user_date"),
    )
    op.create_index(
        "ix_reports_neighborhood_status", "reports", ["neighborhood_id", "status"]
    )

    op.create_table(
        "rate_limit_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("client_id", sa.String(64), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_rate_limit_client_ts", "rate_limit_events", ["client_id", "timestamp"]
    )
    op.create_index("ix_rate_limit_ts", "rate_limit_events", ["timestamp"])


def downgrade() -> None:
    """Drop everything created by :func:`upgrade`."""
    op.drop_index("ix_rate_limit_ts", table_name="rate_limit_events")
    op.drop_index("ix_rate_limit_client_ts", table_name="rate_limit_events")
    op.drop_table("rate_limit_events")

    op.drop_index("ix_reports_neighborhood_status", table_name="reports")
    op.drop_table("reports")
    op.drop_table("challenges")

    op.drop_index("ix_users_neighborhood_role", table_name="users")
    op.drop_table("users")
    op.drop_table("neighborhoods")
