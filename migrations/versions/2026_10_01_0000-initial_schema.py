"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - accounts: owner identities
    - short_links: short code mappings; the unique index on short_code
      spans soft-deleted rows too
    """
    op.create_table(
        'accounts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_accounts_email', 'accounts', ['email'], unique=True)

    op.create_table(
        'short_links',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('original_url', sa.Text(), nullable=False),
        sa.Column('short_code', sa.String(length=32), nullable=False),
        sa.Column('click_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('owner_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['accounts.id'], name='fk_short_links_owner_id'),
    )
    op.create_index('ix_short_links_short_code', 'short_links', ['short_code'], unique=True)
    op.create_index('ix_short_links_owner_id', 'short_links', ['owner_id'])
    op.create_index('ix_short_links_created_at', 'short_links', ['created_at'])
    op.create_index('ix_short_links_deleted_at', 'short_links', ['deleted_at'])


def downgrade() -> None:
    op.drop_index('ix_short_links_deleted_at', table_name='short_links')
    op.drop_index('ix_short_links_created_at', table_name='short_links')
    op.drop_index('ix_short_links_owner_id', table_name='short_links')
    op.drop_index('ix_short_links_short_code', table_name='short_links')
    op.drop_table('short_links')

    op.drop_index('ix_accounts_email', table_name='accounts')
    op.drop_table('accounts')
