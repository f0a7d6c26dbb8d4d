"""create_weekly_generation_tables

Revision ID: 0001_weekly_generation
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_weekly_generation'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, variations and weekly_session_records tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('baseline_metrics', sa.JSON(), nullable=True),
        sa.Column('discomforts', sa.JSON(), nullable=False),
        sa.Column('objectives', sa.JSON(), nullable=False),
        sa.Column('preferred_discipline', sa.String(length=64), nullable=True),
        sa.Column('blacklisted_variation_ids', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )

    op.create_table(
        'variations',
        sa.Column('pk', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('disciplines', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('phase', sa.String(length=16), nullable=True),
        sa.PrimaryKeyConstraint('pk', name='pk_variations'),
    )
    op.create_index('ix_variations_id', 'variations', ['id'], unique=True)

    op.create_table(
        'weekly_session_records',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('week_timestamp', sa.BigInteger(), nullable=False),
        sa.Column('weekly_plan', sa.JSON(), nullable=False),
        sa.Column('final_sessions', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE', name='fk_weekly_session_records_user_id'),
        sa.PrimaryKeyConstraint('id', name='pk_weekly_session_records'),
        sa.UniqueConstraint('user_id', 'week_timestamp', name='uq_user_week_timestamp'),
    )
    op.create_index('ix_weekly_session_records_user_id', 'weekly_session_records', ['user_id'])


def downgrade() -> None:
    """Drop weekly generation tables."""
    op.drop_index('ix_weekly_session_records_user_id', table_name='weekly_session_records')
    op.drop_table('weekly_session_records')
    op.drop_index('ix_variations_id', table_name='variations')
    op.drop_table('variations')
    op.drop_table('users')
