"""TILIN Ops - Sales, recipes, stock and expenses

Revision ID: 001_tilin_ops_schema
Revises:
Create Date: 2026-10-19

Tables read by the forecasting and analytics engines:
- ingredients / products / recipe_items: recipe explosion and cost
- sales / sale_items: order lifecycle and revenue
- platform_configs: delivery commission per channel
- expenses / waste_logs: break-even and stock deductions
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '001_tilin_ops_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # =========================================================================
    # INGREDIENTS
    # =========================================================================
    op.create_table(
        'ingredients',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('unit', sa.String(20), nullable=False),
        sa.Column('cost', sa.Numeric(12, 4), nullable=False),  # present-day, per unit
        sa.Column('stock', sa.Numeric(12, 4), nullable=False),  # may go negative
        sa.Column('min_stock', sa.Numeric(12, 4), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('idx_ingredients_name', 'ingredients', ['name'])

    # =========================================================================
    # PRODUCTS & RECIPES
    # =========================================================================
    op.create_table(
        'products',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('category_id', sa.Uuid(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint('price >= 0', name='products_price_non_negative'),
    )

    op.create_table(
        'recipe_items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('product_id', sa.Uuid(),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('ingredient_id', sa.Uuid(),
                  sa.ForeignKey('ingredients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('quantity', sa.Numeric(12, 4), nullable=False),
        sa.CheckConstraint('quantity > 0', name='recipe_items_quantity_positive'),
    )
    op.create_index('idx_recipe_items_product', 'recipe_items', ['product_id'])

    # =========================================================================
    # SALES
    # =========================================================================
    op.create_table(
        'sales',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        # Negative discount = frozen commission percent for this sale
        sa.Column('discount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_method', sa.String(50), nullable=False),
        sa.Column('channel', sa.String(100), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('client_name', sa.String(255), nullable=True),
        sa.Column('customer_id', sa.Uuid(), nullable=True),
        sa.CheckConstraint(
            "status IN ('PENDING', 'IN_PROGRESS', 'READY', 'COMPLETED', 'REFUNDED')",
            name='sales_status_valid',
        ),
    )
    op.create_index('idx_sales_date_status', 'sales', ['date', 'status'])

    op.create_table(
        'sale_items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('sale_id', sa.Uuid(),
                  sa.ForeignKey('sales.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),  # no FK: products may be deleted
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint('quantity > 0', name='sale_items_quantity_positive'),
        sa.CheckConstraint('unit_price >= 0', name='sale_items_price_non_negative'),
    )
    op.create_index('idx_sale_items_sale', 'sale_items', ['sale_id'])

    # =========================================================================
    # PLATFORMS, EXPENSES, WASTE
    # =========================================================================
    op.create_table(
        'platform_configs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('commission', sa.Numeric(5, 2), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint(
            'commission >= 0 AND commission <= 100',
            name='platform_configs_commission_range',
        ),
    )

    op.create_table(
        'expenses',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('is_fixed', sa.Boolean(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
    )
    op.create_index('idx_expenses_date', 'expenses', ['date'])

    op.create_table(
        'waste_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('cost', sa.Numeric(12, 2), nullable=False),
        sa.Column('ingredient_id', sa.Uuid(),
                  sa.ForeignKey('ingredients.id', ondelete='SET NULL'), nullable=True),
        sa.Column('quantity', sa.Numeric(12, 4), nullable=True),
        sa.Column('date', sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('waste_logs')
    op.drop_table('expenses')
    op.drop_table('platform_configs')
    op.drop_table('sale_items')
    op.drop_table('sales')
    op.drop_table('recipe_items')
    op.drop_table('products')
    op.drop_table('ingredients')
