"""Initial database schema for Taskboard.

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the tasks table."""
    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(255)),
        sa.Column(
            'status',
            sa.Enum('todo', 'in-progress', 'done', 'canceled', name='task_status', native_enum=False, length=30),
            nullable=False,
            server_default='todo',
        ),
        sa.Column(
            'label',
            sa.Enum('bug', 'feature', 'enhancement', 'documentation', name='task_label', native_enum=False, length=30),
            nullable=False,
            server_default='bug',
        ),
        sa.Column(
            'priority',
            sa.Enum('low', 'medium', 'high', name='task_priority', native_enum=False, length=30),
            nullable=False,
            server_default='low',
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_tasks_status', 'tasks', ['status'])
    op.create_index('ix_tasks_priority', 'tasks', ['priority'])
    op.create_index('ix_tasks_created_at', 'tasks', ['created_at'])


def downgrade() -> None:
    """Drop the tasks table."""
    op.drop_index('ix_tasks_created_at', table_name='tasks')
    op.drop_index('ix_tasks_priority', table_name='tasks')
    op.drop_index('ix_tasks_status', table_name='tasks')
    op.drop_table('tasks')
