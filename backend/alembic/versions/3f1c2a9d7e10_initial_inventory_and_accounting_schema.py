"""initial inventory and accounting schema

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-17 09:12:40.512331

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7e10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def _audit_columns():
    return _timestamp_columns() + [
        sa.Column('disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('disabled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('disabled_by', sa.String(), nullable=True),
    ]


def _index_disabled(table_name: str):
    op.create_index(op.f(f'ix_{table_name}_disabled'), table_name, ['disabled'], unique=False)


def upgrade() -> None:
    """Create the catalogue, ledger, chart of accounts, journal and document tables."""
    op.create_table(
        'units',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False, unique=True),
        *_audit_columns(),
    )
    _index_disabled('units')

    op.create_table(
        'items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('base_unit_id', sa.Integer(), sa.ForeignKey('units.id'), nullable=False),
        *_audit_columns(),
    )
    _index_disabled('items')

    op.create_table(
        'item_details',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('items.id'), nullable=False),
        sa.Column('unit_id', sa.Integer(), sa.ForeignKey('units.id'), nullable=False),
        sa.Column('conversion_factor', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(18, 4), nullable=True),
        *_audit_columns(),
        sa.CheckConstraint('conversion_factor >= 1', name='check_item_detail_conversion_factor'),
    )
    op.create_index(op.f('ix_item_details_code'), 'item_details', ['code'], unique=False)
    op.create_index(op.f('ix_item_details_item_id'), 'item_details', ['item_id'], unique=False)
    _index_disabled('item_details')

    op.create_table(
        'inventory_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('items.id'), nullable=False),
        sa.Column('item_detail_id', sa.Integer(), sa.ForeignKey('item_details.id'), nullable=True),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('transaction_type', sa.String(length=30), nullable=False),
        sa.Column('quantity_transacted', sa.Numeric(18, 4), nullable=False),
        sa.Column('unit_id_transacted', sa.Integer(), sa.ForeignKey('units.id'), nullable=False),
        sa.Column('conversion_factor_applied', sa.Integer(), nullable=False),
        sa.Column('quantity_in_base_units', sa.Integer(), nullable=False),
        sa.Column('cost_price_per_base_unit', sa.Numeric(18, 4), nullable=True),
        sa.Column('sale_price_per_transacted_unit', sa.Numeric(18, 4), nullable=True),
        sa.Column('reference_code', sa.String(length=20), nullable=True),
        sa.Column('notes', sa.String(length=500), nullable=True),
    )
    op.create_index(op.f('ix_inventory_logs_item_id'), 'inventory_logs', ['item_id'], unique=False)
    op.create_index(op.f('ix_inventory_logs_timestamp'), 'inventory_logs', ['timestamp'], unique=False)

    op.create_table(
        'account_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False, unique=True),
        *_audit_columns(),
    )
    _index_disabled('account_categories')

    op.create_table(
        'account_sub_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('account_categories.id'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        *_audit_columns(),
        sa.UniqueConstraint('category_id', 'name', name='_account_sub_category_name_uc'),
    )
    _index_disabled('account_sub_categories')

    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('account_number', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('account_categories.id'), nullable=False),
        sa.Column('sub_category_id', sa.Integer(), sa.ForeignKey('account_sub_categories.id'), nullable=True),
        sa.Column('normal_balance', sa.String(length=6), nullable=False),
        sa.Column('currency_code', sa.String(length=3), nullable=True),
        *_audit_columns(),
        sa.CheckConstraint("normal_balance IN ('debit', 'credit')", name='check_account_normal_balance'),
    )
    op.create_index(op.f('ix_accounts_account_number'), 'accounts', ['account_number'], unique=True)
    _index_disabled('accounts')

    op.create_table(
        'journal_pages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('currency_id', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('ref', sa.String(length=50), nullable=True),
        sa.Column('source', sa.String(length=50), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        *_audit_columns(),
    )
    op.create_index(op.f('ix_journal_pages_user_id'), 'journal_pages', ['user_id'], unique=False)
    _index_disabled('journal_pages')

    op.create_table(
        'journal_posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('journal_page_id', sa.Integer(), sa.ForeignKey('journal_pages.id'), nullable=False),
        sa.Column('account_number', sa.String(length=20), sa.ForeignKey('accounts.account_number'), nullable=False),
        sa.Column('ref', sa.String(length=50), nullable=True),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('debit', sa.Numeric(18, 2), sa.CheckConstraint('debit >= 0'), nullable=False),
        sa.Column('credit', sa.Numeric(18, 2), sa.CheckConstraint('credit >= 0'), nullable=False),
        sa.CheckConstraint(
            '(debit > 0 AND credit = 0) OR (debit = 0 AND credit > 0) OR (debit = 0 AND credit = 0)',
            name='check_debit_or_credit_exclusive'
        ),
    )
    op.create_index(op.f('ix_journal_posts_journal_page_id'), 'journal_posts', ['journal_page_id'], unique=False)
    op.create_index(op.f('ix_journal_posts_account_number'), 'journal_posts', ['account_number'], unique=False)

    op.create_table(
        'purchases',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('supplier_name', sa.String(length=150), nullable=True),
        sa.Column('stock_location', sa.String(length=150), nullable=True),
        sa.Column('cost', sa.Numeric(18, 2), nullable=False),
        sa.Column('journal_page_id', sa.Integer(), sa.ForeignKey('journal_pages.id'), nullable=True),
        *_audit_columns(),
    )
    op.create_index(op.f('ix_purchases_code'), 'purchases', ['code'], unique=True)
    _index_disabled('purchases')

    op.create_table(
        'purchase_details',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('purchase_id', sa.Integer(), sa.ForeignKey('purchases.id'), nullable=False),
        sa.Column('item_code', sa.String(length=20), nullable=False),
        sa.Column('item_detail_id', sa.Integer(), sa.ForeignKey('item_details.id'), nullable=False),
        sa.Column('qty', sa.Integer(), nullable=False),
        sa.Column('cost', sa.Numeric(18, 2), nullable=False),
    )
    op.create_index(op.f('ix_purchase_details_purchase_id'), 'purchase_details', ['purchase_id'], unique=False)

    op.create_table(
        'sales',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('stock_location', sa.String(length=150), nullable=True),
        sa.Column('price', sa.Numeric(18, 2), nullable=False),
        sa.Column('total_cogs', sa.Numeric(18, 2), nullable=False),
        sa.Column('journal_page_id', sa.Integer(), sa.ForeignKey('journal_pages.id'), nullable=True),
        *_audit_columns(),
    )
    op.create_index(op.f('ix_sales_code'), 'sales', ['code'], unique=True)
    _index_disabled('sales')

    op.create_table(
        'sale_details',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sale_id', sa.Integer(), sa.ForeignKey('sales.id'), nullable=False),
        sa.Column('item_code', sa.String(length=20), nullable=False),
        sa.Column('item_detail_id', sa.Integer(), sa.ForeignKey('item_details.id'), nullable=False),
        sa.Column('qty', sa.Numeric(18, 4), nullable=False),
        sa.Column('price', sa.Numeric(18, 2), nullable=False),
        sa.Column('calculated_cogs', sa.Numeric(18, 2), nullable=False),
    )
    op.create_index(op.f('ix_sale_details_sale_id'), 'sale_details', ['sale_id'], unique=False)

    op.create_table(
        'currency_exchanges',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('exchange_option', sa.String(length=10), nullable=False),
        sa.Column('from_amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('to_amount', sa.Numeric(18, 2), nullable=False),
        sa.Column('rate', sa.Numeric(18, 4), nullable=False),
        sa.Column('bank_location', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        *_audit_columns(),
    )
    op.create_index(op.f('ix_currency_exchanges_timestamp'), 'currency_exchanges', ['timestamp'], unique=False)
    _index_disabled('currency_exchanges')

    op.create_table(
        'financial_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('cash_account_number', sa.String(length=20), sa.ForeignKey('accounts.account_number'), nullable=False),
        sa.Column('inventory_account_number', sa.String(length=20), sa.ForeignKey('accounts.account_number'), nullable=False),
        sa.Column('sales_account_number', sa.String(length=20), sa.ForeignKey('accounts.account_number'), nullable=False),
        sa.Column('cogs_account_number', sa.String(length=20), sa.ForeignKey('accounts.account_number'), nullable=False),
        *_timestamp_columns(),
    )


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table_name in [
        'financial_settings',
        'currency_exchanges',
        'sale_details',
        'sales',
        'purchase_details',
        'purchases',
        'journal_posts',
        'journal_pages',
        'accounts',
        'account_sub_categories',
        'account_categories',
        'inventory_logs',
        'item_details',
        'items',
        'units',
    ]:
        op.drop_table(table_name)
