"""add feed indexes

Revision ID: 96712afada05
Revises: 3c1d7e9a0b42
Create Date: 2026-10-19 09:31:05.522433

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '96712afada05'
down_revision: Union[str, Sequence[str], None] = '3c1d7e9a0b42'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _existing_indexes(table: str) -> set:
    inspector = sa.inspect(op.get_bind())
    return {ix["name"] for ix in inspector.get_indexes(table)}


def upgrade() -> None:
    """Upgrade schema."""
    existing = _existing_indexes('posts')

    # Global feed: newest posts first
    if 'idx_posts_created' not in existing:
        op.create_index('idx_posts_created', 'posts', [sa.text('created_at DESC')], unique=False)

    # Follow-filtered feed and profile timelines: posts(user_id, created_at)
    if 'idx_posts_user_created' not in existing:
        op.create_index('idx_posts_user_created', 'posts', ['user_id', 'created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_posts_user_created', table_name='posts')
    op.drop_index('idx_posts_created', table_name='posts')
