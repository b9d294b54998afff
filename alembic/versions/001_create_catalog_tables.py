"""Create catalog tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

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
    """Create categories, subcategories, brands, sellers and products tables."""
    op.create_table(
        'categories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False, index=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='Active'),
        sa.Column('icon', sa.String(1000), nullable=True),
        sa.Column('image', sa.String(1000), nullable=True),
        sa.Column('parent_id', sa.String(36),
                  sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True, index=True),
    )

    # Legacy subcategories (no status column)
    op.create_table(
        'subcategories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False, index=True),
    )

    op.create_table(
        'brands',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
    )

    op.create_table(
        'sellers',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('store_name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(320), nullable=True),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('fssai_lic_no', sa.String(50), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('service_radius_km', sa.Float(), nullable=True),
    )

    op.create_table(
        'products',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('product_name', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('tags', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='Active'),
        sa.Column('publish', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_shop_by_store_only', sa.Boolean(), nullable=True),
        sa.Column('category_id', sa.String(36), sa.ForeignKey('categories.id'), nullable=True, index=True),
        sa.Column('subcategory_id', sa.String(36), nullable=True, index=True),
        sa.Column('brand_id', sa.String(36), sa.ForeignKey('brands.id'), nullable=True, index=True),
        sa.Column('seller_id', sa.String(36), sa.ForeignKey('sellers.id'), nullable=True, index=True),
        sa.Column('price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('mrp', sa.Float(), nullable=True),
        sa.Column('discount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('pack', sa.String(100), nullable=True),
        sa.Column('main_image', sa.String(1000), nullable=True),
        sa.Column('variations', sa.JSON(), nullable=True),
        sa.Column('rating', sa.Float(), nullable=False, server_default='0'),
        sa.Column('reviews_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('popular', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('deal_of_day', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Listing filters and sorts
    op.create_index('ix_products_status_publish', 'products', ['status', 'publish'])
    op.create_index('ix_products_price', 'products', ['price'])
    op.create_index('ix_products_discount', 'products', ['discount'])
    op.create_index('ix_products_created_at', 'products', ['created_at'])


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('products')
    op.drop_table('sellers')
    op.drop_table('brands')
    op.drop_table('subcategories')
    op.drop_table('categories')
