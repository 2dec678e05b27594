"""Users table

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        # Authoritative uniqueness guard; register() pre-checks as well
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), nullable=False, server_default='client-user'),
        sa.Column('name', sa.String(255), nullable=False, server_default=''),
        sa.Column('phone_number', sa.String(50), nullable=False, server_default=''),
        sa.Column('birth_date', sa.String(50), nullable=False, server_default=''),
        sa.Column('gender', sa.String(50), nullable=False, server_default=''),
        sa.Column('avatar', sa.String(1024), nullable=False, server_default=''),
        sa.Column('age', sa.String(10), nullable=False, server_default=''),
        sa.Column('doctor_id', sa.String(255), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
