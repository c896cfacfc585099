"""create coupons table

Revision ID: 5e2f7c9d0b13
Revises: 
Create Date: 2026-10-19 10:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5e2f7c9d0b13'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'coupons',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_usage', sa.Integer(), nullable=True),
        sa.Column('min_cart_value', sa.DECIMAL(10, 2), nullable=True),
        sa.Column('max_discount', sa.DECIMAL(10, 2), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('code', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_coupons_id', 'coupons', ['id'])
    op.create_index('idx_coupons_is_active', 'coupons', ['is_active'])
    op.create_index('idx_coupons_code', 'coupons', ['code'])
    op.create_index('idx_coupons_created', 'coupons', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_coupons_created', table_name='coupons')
    op.drop_index('idx_coupons_code', table_name='coupons')
    op.drop_index('idx_coupons_is_active', table_name='coupons')
    op.drop_index('ix_coupons_id', table_name='coupons')
    op.drop_table('coupons')
