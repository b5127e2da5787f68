"""Create users, maintenance_logs and ticket_events

Revision ID: a3f1c2d4e5b6
Revises:
Create Date: 2026-09-28 10:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "a3f1c2d4e5b6"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("surname", sa.String(100), nullable=True),
        sa.Column("account_type", sa.String(16), nullable=False, server_default="student"),
        sa.Column("room_number", sa.String(20), nullable=True),
        sa.Column("uobk_id", sa.String(50), nullable=True),
        sa.Column("staff_role", sa.String(50), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="Active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "maintenance_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("room_number", sa.String(20), nullable=False),
        sa.Column("issue_type", sa.String(50), nullable=False),
        sa.Column("urgency", sa.String(32), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("reporter_email", sa.String(255), nullable=False),
        sa.Column("status", sa.String(32), nullable=True),
        sa.Column("date_reported", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("resolved_by", sa.String(255), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_maintenance_logs_reporter_email", "maintenance_logs", ["reporter_email"])
    op.create_index("ix_maintenance_logs_date_reported", "maintenance_logs", ["date_reported"])

    op.create_table(
        "ticket_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "ticket_id",
            sa.Integer(),
            sa.ForeignKey("maintenance_logs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("actor_email", sa.String(255), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("from_value", sa.String(64), nullable=True),
        sa.Column("to_value", sa.String(64), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_ticket_events_ticket_id", "ticket_events", ["ticket_id"])


def downgrade() -> None:
    op.drop_index("ix_ticket_events_ticket_id", table_name="ticket_events")
    op.drop_table("ticket_events")
    op.drop_index("ix_maintenance_logs_date_reported", table_name="maintenance_logs")
    op.drop_index("ix_maintenance_logs_reporter_email", table_name="maintenance_logs")
    op.drop_table("maintenance_logs")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
