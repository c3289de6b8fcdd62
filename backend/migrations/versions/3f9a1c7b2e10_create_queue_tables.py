"""create_queue_tables

Revision ID: 3f9a1c7b2e10
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '3f9a1c7b2e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)
    tables = insp.get_table_names()
    if 'queue_entries' not in tables:
        op.create_table(
            'queue_entries',
            sa.Column('id', sa.BigInteger(), autoincrement=False, nullable=False),
            sa.Column('source_url', sa.String(), nullable=False),
            sa.Column('media_ref', sa.String(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('duration', sa.String(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_queue_entries_media_ref', 'queue_entries', ['media_ref'])
    if 'play_history' not in tables:
        op.create_table(
            'play_history',
            sa.Column('id', sa.BigInteger(), autoincrement=False, nullable=False),
            sa.Column('source_url', sa.String(), nullable=False),
            sa.Column('media_ref', sa.String(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('duration', sa.String(), nullable=False),
            sa.Column('played_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_play_history_played_at', 'play_history', ['played_at'])


def downgrade() -> None:
    op.drop_index('ix_play_history_played_at', table_name='play_history')
    op.drop_table('play_history')
    op.drop_index('ix_queue_entries_media_ref', table_name='queue_entries')
    op.drop_table('queue_entries')
