"""Create order_mapping table

Revision ID: 001
Revises:
Create Date: 2026-10-18 10:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'order_mapping',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('woo_order_id', sa.Text(), nullable=False),
        sa.Column('ongoing_order_id', sa.Text(), nullable=False),
        sa.Column('customer_name', sa.Text(), nullable=True),
        sa.Column('order_number', sa.Text(), nullable=True),
        sa.Column('mapping_type', sa.String(16), nullable=False),
        sa.Column('confidence', sa.Integer(), nullable=False, server_default='100'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('woo_order_data', sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'), nullable=True),
        sa.Column('ongoing_order_data', sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'), nullable=True),
        sa.Column('mapped_by', sa.Text(), nullable=True),
        sa.Column('mapped_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "mapping_type IN ('exact', 'manual', 'suggested')",
            name=op.f('ck_order_mapping_type'),
        ),
        sa.CheckConstraint(
            'confidence >= 0 AND confidence <= 100',
            name=op.f('ck_order_mapping_confidence'),
        ),
    )

    op.create_index('ix_order_mapping_woo_order_id', 'order_mapping', ['woo_order_id'])
    op.create_index('ix_order_mapping_ongoing_order_id', 'order_mapping', ['ongoing_order_id'])
    op.create_index('ix_order_mapping_pair', 'order_mapping', ['woo_order_id', 'ongoing_order_id'])

    # At most one active mapping per pair
    op.create_index(
        'uq_order_mapping_active_pair',
        'order_mapping',
        ['woo_order_id', 'ongoing_order_id'],
        unique=True,
        postgresql_where=sa.text('is_active'),
        sqlite_where=sa.text('is_active = 1'),
    )


def downgrade():
    op.drop_table('order_mapping')
