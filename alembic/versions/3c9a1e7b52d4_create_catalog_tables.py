"""create_catalog_tables

Revision ID: 3c9a1e7b52d4
Revises:
Create Date: 2026-10-16 10:12:31.418207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c9a1e7b52d4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'products',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image_filename', sa.String(), nullable=False),
        sa.Column('image_path', sa.String(), nullable=False),
        sa.Column('image_blob_id', sa.String(), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_products_category'), 'products', ['category'], unique=False)
    op.create_index(op.f('ix_products_order_index'), 'products', ['order_index'], unique=False)

    op.create_table(
        'gallery_items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('image_filename', sa.String(), nullable=False),
        sa.Column('image_path', sa.String(), nullable=False),
        sa.Column('image_blob_id', sa.String(), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_gallery_items_category'), 'gallery_items', ['category'], unique=False)
    op.create_index(op.f('ix_gallery_items_order_index'), 'gallery_items', ['order_index'], unique=False)

    op.create_table(
        'contact_inquiries',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('service', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='unread'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_contact_inquiries_created_at'), 'contact_inquiries', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_contact_inquiries_created_at'), table_name='contact_inquiries')
    op.drop_table('contact_inquiries')
    op.drop_index(op.f('ix_gallery_items_order_index'), table_name='gallery_items')
    op.drop_index(op.f('ix_gallery_items_category'), table_name='gallery_items')
    op.drop_table('gallery_items')
    op.drop_index(op.f('ix_products_order_index'), table_name='products')
    op.drop_index(op.f('ix_products_category'), table_name='products')
    op.drop_table('products')
