"""Create check-in roster, daily counters and admin sessions.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "logins",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("device_id", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("job_id", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=False),
        sa.Column("company", sa.String(), nullable=False),
        sa.Column("area", sa.String(), nullable=False),
        sa.Column("cluster", sa.String(), nullable=False),
        sa.Column("plant", sa.String(), nullable=False),
        sa.Column("ts", sa.String(), nullable=False),
        sa.UniqueConstraint("device_id", name="uq_logins_device_id"),
    )
    op.create_index("ix_logins_id", "logins", ["id"])
    op.create_index("ix_logins_company", "logins", ["company"])
    op.create_index("ix_logins_ts", "logins", ["ts"])

    op.create_table(
        "login_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ts_date", sa.Date(), nullable=False),
        sa.Column("area", sa.String(), nullable=False),
        sa.Column("cluster", sa.String(), nullable=False),
        sa.Column("plant", sa.String(), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False, server_default="1"),
        sa.UniqueConstraint("ts_date", "area", "cluster", "plant", name="uq_login_events_day_location"),
    )
    op.create_index("ix_login_events_id", "login_events", ["id"])

    op.create_table(
        "admin_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("token_hash", name="uq_admin_sessions_token_hash"),
    )
    op.create_index("ix_admin_sessions_id", "admin_sessions", ["id"])
    op.create_index("ix_admin_sessions_expires_at", "admin_sessions", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_admin_sessions_expires_at", table_name="admin_sessions")
    op.drop_index("ix_admin_sessions_id", table_name="admin_sessions")
    op.drop_table("admin_sessions")
    op.drop_index("ix_login_events_id", table_name="login_events")
    op.drop_table("login_events")
    op.drop_index("ix_logins_ts", table_name="logins")
    op.drop_index("ix_logins_company", table_name="logins")
    op.drop_index("ix_logins_id", table_name="logins")
    op.drop_table("logins")
