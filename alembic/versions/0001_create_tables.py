"""create users, stocks and transactions

Revision ID: 0001
Revises:
Create Date: 2025-06-26 12:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('username', sa.String(length=255), nullable=False, unique=True),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
    )
    op.create_table(
        'stocks',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('symbol', sa.String(length=10), nullable=False, unique=True),
        sa.Column('price', sa.Numeric(12, 4), nullable=False),
        sa.CheckConstraint('price > 0', name='stock_price_positive'),
    )
    op.create_table(
        'transactions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('stock_id', sa.Uuid(), sa.ForeignKey('stocks.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column(
            'transaction_type',
            sa.Enum('buy', 'sell', name='transaction_type', native_enum=False, create_constraint=True),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('quantity > 0', name='transaction_quantity_positive'),
    )
    op.create_index('ix_transactions_user_stock', 'transactions', ['user_id', 'stock_id'])
    op.create_index('ix_transactions_user_created', 'transactions', ['user_id', 'created_at'])


def downgrade():
    op.drop_index('ix_transactions_user_created', table_name='transactions')
    op.drop_index('ix_transactions_user_stock', table_name='transactions')
    op.drop_table('transactions')
    op.drop_table('stocks')
    op.drop_table('users')
