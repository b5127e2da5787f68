"""Normalize legacy ticket statuses, urgency and email case

Revision ID: b7d2e8f9a0c1
Revises: a3f1c2d4e5b6
Create Date: 2026-10-05 09:30:00.000000

- maintenance_logs.status: "Complete" -> "Resolved", "In Progress"/NULL -> "Unresolved"
- maintenance_logs.urgency: NULL/"" -> "Standard"
- users.email, maintenance_logs.reporter_email: lower-cased
- resolved_by/resolved_at are left NULL on rows resolved before the audit fields existed
"""

from alembic import op


revision = "b7d2e8f9a0c1"
down_revision = "a3f1c2d4e5b6"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("UPDATE maintenance_logs SET status = 'Resolved' WHERE status = 'Complete'")
    op.execute(
        "UPDATE maintenance_logs SET status = 'Unresolved' "
        "WHERE status IS NULL OR status = 'In Progress'"
    )
    op.execute("UPDATE maintenance_logs SET urgency = 'Standard' WHERE urgency IS NULL OR urgency = ''")
    op.execute("UPDATE maintenance_logs SET reporter_email = LOWER(reporter_email)")
    op.execute("UPDATE users SET email = LOWER(email)")


def downgrade() -> None:
    # Legacy spellings are not recoverable.
    pass
