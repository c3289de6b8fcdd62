"""add_position_to_queue_entries

Revision ID: 7c4e2a9d5b31
Revises: 3f9a1c7b2e10
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '7c4e2a9d5b31'
down_revision: Union[str, Sequence[str], None] = '3f9a1c7b2e10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    columns = [column['name'] for column in sa.inspect(bind).get_columns('queue_entries')]
    if 'position' in columns:
        return
    op.add_column('queue_entries', sa.Column('position', sa.Integer(), nullable=False, server_default='0'))

    # Existing rows were ordered by id
    ids = [row[0] for row in bind.execute(sa.text('SELECT id FROM queue_entries ORDER BY id'))]
    for position, entry_id in enumerate(ids, start=1):
        bind.execute(
            sa.text('UPDATE queue_entries SET position = :position WHERE id = :id'),
            {'position': position, 'id': entry_id},
        )
    op.create_index('ix_queue_entries_position', 'queue_entries', ['position'])


def downgrade() -> None:
    with op.batch_alter_table('queue_entries') as batch_op:
        batch_op.drop_index('ix_queue_entries_position')
        batch_op.drop_column('position')
