"""Add activity_logs table — append-only audit trail.

Revision ID: 002_activity_logs
Revises: 001_initial
Create Date: 2026-10-18

user_id is nullable: failed logins for unknown usernames are recorded
without an account.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002_activity_logs"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("log_type", sa.String(20), nullable=False),
        sa.Column("entity_type", sa.String(20), nullable=False),
        sa.Column("entity_id", sa.Integer, nullable=True),
        sa.Column("details", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    for column in ("user_id", "log_type", "entity_type", "entity_id", "created_at"):
        op.create_index(f"ix_activity_logs_{column}", "activity_logs", [column])


def downgrade() -> None:
    op.drop_table("activity_logs")
