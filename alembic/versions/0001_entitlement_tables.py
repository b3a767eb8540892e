"""entitlement tables

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'billing_accounts',
        sa.Column('account_id', sa.String(length=64), nullable=False),
        sa.Column('subscription_id', sa.String(length=255), nullable=True),
        sa.Column('plan_id', sa.String(length=255), nullable=True),
        sa.Column('customer_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('account_id'),
    )
    op.create_index(op.f('ix_billing_accounts_subscription_id'), 'billing_accounts', ['subscription_id'], unique=False)

    op.create_table(
        'free_allowances',
        sa.Column('account_id', sa.String(length=64), nullable=False),
        sa.Column('credit', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['account_id'], ['billing_accounts.account_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('account_id'),
    )

    op.create_table(
        'invalid_subscriptions',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('account_id', sa.String(length=64), nullable=False),
        sa.Column('subscription_id', sa.String(length=255), nullable=False),
        sa.Column('plan_id', sa.String(length=255), nullable=True),
        sa.Column('customer_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_invalid_subscriptions_account_id'), 'invalid_subscriptions', ['account_id'], unique=False)

    op.create_table(
        'usage_units',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=False),
        sa.Column('account_id', sa.String(length=64), nullable=False),
        sa.Column('created_at_ms', sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_id'),
    )
    op.create_index(op.f('ix_usage_units_account_id'), 'usage_units', ['account_id'], unique=False)
    op.create_index('idx_usage_units_account_created', 'usage_units', ['account_id', 'created_at_ms'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_usage_units_account_created', table_name='usage_units')
    op.drop_index(op.f('ix_usage_units_account_id'), table_name='usage_units')
    op.drop_table('usage_units')
    op.drop_index(op.f('ix_invalid_subscriptions_account_id'), table_name='invalid_subscriptions')
    op.drop_table('invalid_subscriptions')
    op.drop_table('free_allowances')
    op.drop_index(op.f('ix_billing_accounts_subscription_id'), table_name='billing_accounts')
    op.drop_table('billing_accounts')
