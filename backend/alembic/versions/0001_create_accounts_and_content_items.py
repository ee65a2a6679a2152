"""Create accounts and content items with visibility shape constraints"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str | None = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Apply schema changes."""
    # Create accounts table
    op.create_table(
        'accounts',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False),
        sa.Column('commune_id', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_accounts')),
        sa.UniqueConstraint('email', name=op.f('uq_accounts_email')),
        sa.CheckConstraint(
            "role IN ('user', 'admin', 'superadmin')",
            name='ck_accounts_role',
        ),
        sa.CheckConstraint(
            "role <> 'admin' OR (commune_id IS NOT NULL AND commune_id <> '')",
            name='ck_accounts_admin_commune',
        ),
    )
    op.create_index('ix_accounts_email', 'accounts', ['email'], unique=False)
    op.create_index('ix_accounts_commune_id', 'accounts', ['commune_id'], unique=False)

    # Create content_items table
    op.create_table(
        'content_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('kind', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('body', sa.Text(), server_default='', nullable=False),
        sa.Column('category', sa.String(length=64), nullable=True),
        sa.Column('visibility', sa.String(length=16), nullable=False),
        sa.Column('commune_id', sa.String(length=100), nullable=True),
        sa.Column('audience_communes', postgresql.ARRAY(sa.String(length=100)), nullable=True),
        sa.Column('priority', sa.String(length=16), server_default='normal', nullable=False),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('author_id', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_content_items')),
        sa.CheckConstraint(
            "kind IN ('incidents', 'notifications', 'infos', 'projects', 'articles')",
            name='ck_content_items_kind',
        ),
        sa.CheckConstraint(
            "priority IN ('normal', 'pinned', 'urgent')",
            name='ck_content_items_priority',
        ),
        sa.CheckConstraint(
            "(visibility = 'local' AND commune_id IS NOT NULL AND commune_id <> '' "
            "AND (audience_communes IS NULL OR cardinality(audience_communes) = 0))"
            " OR (visibility = 'global' AND commune_id IS NULL "
            "AND (audience_communes IS NULL OR cardinality(audience_communes) = 0))"
            " OR (visibility = 'custom' AND commune_id IS NULL "
            "AND cardinality(audience_communes) > 0)",
            name='ck_content_items_visibility_shape',
        ),
        sa.CheckConstraint(
            'start_at IS NULL OR end_at IS NULL OR start_at <= end_at',
            name='ck_content_items_window',
        ),
    )
    op.create_index('ix_content_items_kind', 'content_items', ['kind'], unique=False)
    op.create_index('ix_content_items_commune_id', 'content_items', ['commune_id'], unique=False)
    op.create_index('ix_content_items_author_id', 'content_items', ['author_id'], unique=False)
    # GIN index for audience membership lookups
    op.create_index(
        'ix_content_items_audience_communes',
        'content_items',
        ['audience_communes'],
        unique=False,
        postgresql_using='gin',
    )


def downgrade() -> None:
    """Revert schema changes."""
    op.drop_index('ix_content_items_audience_communes', table_name='content_items')
    op.drop_index('ix_content_items_author_id', table_name='content_items')
    op.drop_index('ix_content_items_commune_id', table_name='content_items')
    op.drop_index('ix_content_items_kind', table_name='content_items')
    op.drop_table('content_items')

    op.drop_index('ix_accounts_commune_id', table_name='accounts')
    op.drop_index('ix_accounts_email', table_name='accounts')
    op.drop_table('accounts')
