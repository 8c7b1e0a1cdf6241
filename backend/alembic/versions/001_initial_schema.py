"""Initial schema — tasks (Task Store) and user_tasks (User Index).

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tasks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("data", sa.JSON, nullable=False),
    )
    op.create_table(
        "user_tasks",
        sa.Column("user_id", sa.String(255), primary_key=True),
        sa.Column("task_ids", sa.JSON, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("user_tasks")
    op.drop_table("tasks")
