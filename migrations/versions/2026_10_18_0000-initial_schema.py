"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - users: accounts
    - auth_sessions: login sessions
    - short_links: short code mappings (unique code)
    - visit_records: append-only visit log (no foreign key to short_links)
    """
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'auth_sessions',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_auth_sessions_user_id', 'auth_sessions', ['user_id'])
    op.create_index('ix_auth_sessions_token', 'auth_sessions', ['token'], unique=True)
    op.create_index('ix_auth_sessions_expires_at', 'auth_sessions', ['expires_at'])

    op.create_table(
        'short_links',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('destination_url', sa.Text(), nullable=False),
        sa.Column('code', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_short_links_owner_id', 'short_links', ['owner_id'])
    op.create_index('ix_short_links_code', 'short_links', ['code'], unique=True)
    op.create_index('ix_short_links_created_at', 'short_links', ['created_at'])

    op.create_table(
        'visit_records',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('link_id', sa.Integer(), nullable=False),
        sa.Column('visitor_ip', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.Column('referrer', sa.String(length=2048), nullable=True),
        sa.Column('country', sa.String(length=64), nullable=True),
        sa.Column('browser', sa.String(length=50), nullable=False),
        sa.Column('os', sa.String(length=50), nullable=False),
        sa.Column('device', sa.String(length=50), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_visit_records_link_id', 'visit_records', ['link_id'])
    op.create_index('ix_visit_records_timestamp', 'visit_records', ['timestamp'])


def downgrade() -> None:
    """Drop all tables and indexes."""
    op.drop_index('ix_visit_records_timestamp', table_name='visit_records')
    op.drop_index('ix_visit_records_link_id', table_name='visit_records')
    op.drop_table('visit_records')

    op.drop_index('ix_short_links_created_at', table_name='short_links')
    op.drop_index('ix_short_links_code', table_name='short_links')
    op.drop_index('ix_short_links_owner_id', table_name='short_links')
    op.drop_table('short_links')

    op.drop_index('ix_auth_sessions_expires_at', table_name='auth_sessions')
    op.drop_index('ix_auth_sessions_token', table_name='auth_sessions')
    op.drop_index('ix_auth_sessions_user_id', table_name='auth_sessions')
    op.drop_table('auth_sessions')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
