"""initial schema: users and quotes

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=120), nullable=False),
        sa.Column('last_name', sa.String(length=120), nullable=False),
        sa.Column('user_type', sa.String(length=32), nullable=False, server_default='individual'),
        sa.Column('company_name', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_table('quotes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('quote_type', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='pending'),
        sa.Column('estimated_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('coverage_type', sa.String(length=64), nullable=True),
        sa.Column('coverage_level', sa.String(length=64), nullable=True),
        sa.Column('health_info', sa.JSON(), nullable=True),
        sa.Column('employment_status', sa.String(length=64), nullable=True),
        sa.Column('industry', sa.String(length=64), nullable=True),
        sa.Column('num_employees', sa.Integer(), nullable=True),
        sa.Column('annual_revenue', sa.Numeric(15, 2), nullable=True),
        sa.Column('business_info', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint("quote_type IN ('individual', 'business')", name='ck_quotes_quote_type'),
        sa.CheckConstraint(
            "status IN ('pending', 'in_review', 'quoted', 'accepted', 'rejected', 'expired')",
            name='ck_quotes_status',
        ),
    )
    op.create_index('ix_quotes_user_id', 'quotes', ['user_id'])

def downgrade() -> None:
    op.drop_index('ix_quotes_user_id', table_name='quotes')
    op.drop_table('quotes')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
