"""Initial taxonomy and content schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Categories (topics and book genres share the table)
    op.create_table(
        'categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('taxonomy', sa.String(20), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('icon', sa.String(50)),
        sa.Column('color', sa.String(7)),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('featured', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('NOW()')),
        sa.UniqueConstraint('taxonomy', 'slug', name='uq_category_taxonomy_slug'),
    )

    # Subcategories
    op.create_table(
        'subcategories',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('category_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('categories.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('icon', sa.String(50)),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('NOW()')),
        sa.UniqueConstraint('category_id', 'slug', name='uq_subcategory_category_slug'),
    )

    # Posts
    op.create_table(
        'posts',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(220), unique=True, nullable=False),
        sa.Column('excerpt', sa.String(300)),
        sa.Column('published', sa.Boolean, server_default=sa.false()),
        sa.Column('category_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('categories.id', ondelete='SET NULL')),
        sa.Column('subcategory_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('subcategories.id', ondelete='SET NULL')),
        sa.Column('created_at', sa.DateTime, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('NOW()')),
    )

    # Books
    op.create_table(
        'books',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('slug', sa.String(220), unique=True, nullable=False),
        sa.Column('author', sa.String(200)),
        sa.Column('published_year', sa.Integer),
        sa.Column('featured', sa.Boolean, server_default=sa.false()),
        sa.Column('category_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('categories.id', ondelete='SET NULL')),
        sa.Column('subcategory_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('subcategories.id', ondelete='SET NULL')),
        sa.Column('created_at', sa.DateTime, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime, server_default=sa.text('NOW()')),
    )

    # Indexes
    op.create_index('idx_category_taxonomy_order', 'categories', ['taxonomy', 'display_order'])
    op.create_index('idx_subcategory_category_order', 'subcategories', ['category_id', 'display_order'])
    op.create_index('ix_posts_category_id', 'posts', ['category_id'])
    op.create_index('ix_posts_subcategory_id', 'posts', ['subcategory_id'])
    op.create_index('ix_books_category_id', 'books', ['category_id'])
    op.create_index('ix_books_subcategory_id', 'books', ['subcategory_id'])


def downgrade() -> None:
    # Drop indexes
    op.drop_index('ix_books_subcategory_id')
    op.drop_index('ix_books_category_id')
    op.drop_index('ix_posts_subcategory_id')
    op.drop_index('ix_posts_category_id')
    op.drop_index('idx_subcategory_category_order')
    op.drop_index('idx_category_taxonomy_order')

    # Drop tables in reverse order
    op.drop_table('books')
    op.drop_table('posts')
    op.drop_table('subcategories')
    op.drop_table('categories')
