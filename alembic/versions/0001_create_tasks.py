"""create tasks table

Revision ID: 0001_create_tasks
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_create_tasks"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="NEW"),
        sa.Column("created_on", sa.DateTime(timezone=True), nullable=False),
    )
    # Default sort keys of the task listing.
    op.create_index("ix_tasks_created_on", "tasks", ["created_on"], unique=False)
    op.create_index("ix_tasks_status", "tasks", ["status"], unique=False)


def downgrade():
    op.drop_index("ix_tasks_status", table_name="tasks")
    op.drop_index("ix_tasks_created_on", table_name="tasks")
    op.drop_table("tasks")
