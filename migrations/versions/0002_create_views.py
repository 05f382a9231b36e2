"""create_views

Revision ID: 0002
Revises: 0001
Create Date: 2025-11-20 10:05:00.000000

doctor_episode_summary and enemy_appearance_summary.
"""
from typing import Sequence, Union

from alembic import op

from app.core.db_objects import create_view_statements, drop_view_statements


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    for statement in create_view_statements(op.get_bind().dialect.name):
        op.execute(statement)


def downgrade() -> None:
    for statement in drop_view_statements():
        op.execute(statement)
