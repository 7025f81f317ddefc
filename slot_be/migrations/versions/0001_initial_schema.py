"""Initial schema: account, spin_record and symbol tables, with the default symbol table

Revision ID: 0001
Revises:
Create Date: 2025-11-01 00:00:00.000000

"""
from decimal import Decimal

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None # This is the first migration
branch_labels = None
depends_on = None

symbol_table = sa.table('symbol',
    sa.column('id', sa.Integer),
    sa.column('name', sa.String),
    sa.column('value', sa.Numeric(18, 2)),
    sa.column('weight', sa.Integer),
)

# Default symbol table as of this revision
DEFAULT_SYMBOLS = [
    {'id': 1, 'name': 'Nine', 'value': Decimal('0.25'), 'weight': 256},
    {'id': 2, 'name': 'Ten', 'value': Decimal('0.50'), 'weight': 128},
    {'id': 3, 'name': 'Jack', 'value': Decimal('1.00'), 'weight': 64},
    {'id': 4, 'name': 'Queen', 'value': Decimal('2.00'), 'weight': 32},
    {'id': 5, 'name': 'King', 'value': Decimal('4.00'), 'weight': 16},
    {'id': 6, 'name': 'Ace', 'value': Decimal('8.00'), 'weight': 8},
    {'id': 7, 'name': 'Bonus', 'value': Decimal('0.00'), 'weight': 4},
    {'id': 8, 'name': 'Jackpot', 'value': Decimal('100.00'), 'weight': 2},
]


def upgrade():
    # --- account table ---
    op.create_table('account',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('balance', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('free_spins', sa.Integer(), nullable=False),
        sa.Column('multiplier', sa.Integer(), nullable=False),
        sa.Column('modified_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('free_spins >= 0', name='ck_account_free_spins_non_negative'),
        sa.CheckConstraint('multiplier >= 1 AND multiplier <= 10', name='ck_account_multiplier_range'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_account_username'), 'account', ['username'], unique=True)

    # --- spin_record table ---
    op.create_table('spin_record',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('spin_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('drawn_symbols', sa.JSON(), nullable=False),
        sa.Column('bet_amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('win_amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('is_win', sa.Boolean(), nullable=False),
        sa.Column('used_free_spin', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['account.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_spin_record_account_id'), 'spin_record', ['account_id'], unique=False)
    op.create_index(op.f('ix_spin_record_spin_time'), 'spin_record', ['spin_time'], unique=False)

    # --- symbol table ---
    op.create_table('symbol',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=20), nullable=False),
        sa.Column('value', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('weight', sa.Integer(), nullable=False),
        sa.CheckConstraint('weight >= 0', name='ck_symbol_weight_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.bulk_insert(symbol_table, DEFAULT_SYMBOLS)


def downgrade():
    op.drop_table('symbol')
    op.drop_index(op.f('ix_spin_record_spin_time'), table_name='spin_record')
    op.drop_index(op.f('ix_spin_record_account_id'), table_name='spin_record')
    op.drop_table('spin_record')
    op.drop_index(op.f('ix_account_username'), table_name='account')
    op.drop_table('account')
