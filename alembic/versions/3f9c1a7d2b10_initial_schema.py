"""initial schema

Revision ID: 3f9c1a7d2b10
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a7d2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role = sa.Enum('SUPER_ADMIN', 'ADMIN', 'AGENT', name='user_role')
webhook_auth = sa.Enum('BEARER', 'BODY', name='webhook_auth')
conversation_status = sa.Enum('AI_ACTIVE', 'HUMAN_ACTIVE', 'ARCHIVED', name='conversation_status')
sender_type = sa.Enum('AI', 'HUMAN', 'CLIENT', name='sender_type')
audit_action = sa.Enum(
    'TAKE_CONTROL', 'RETURN_TO_AI', 'CREATE_AGENT', 'DELETE_AGENT', 'UPDATE_AGENT',
    name='audit_action',
)


def upgrade() -> None:
    op.create_table('organizations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False, server_default='AGENT'),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    op.create_table('agents',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('webhook_url', sa.Text(), nullable=False),
        sa.Column('api_token', sa.String(length=255), nullable=False),
        sa.Column('webhook_auth', webhook_auth, nullable=False, server_default='BEARER'),
        sa.Column('is_active', sa.Boolean(), nullable=True, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_agents_organization_id', 'agents', ['organization_id'], unique=False)

    op.create_table('conversations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('agent_id', sa.Uuid(), nullable=True),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('client_phone', sa.String(length=50), nullable=False),
        sa.Column('client_phone_key', sa.String(length=32), nullable=True),
        sa.Column('client_name', sa.String(length=255), nullable=True),
        sa.Column('status', conversation_status, nullable=False, server_default='AI_ACTIVE'),
        sa.Column('active_user_id', sa.Uuid(), nullable=True),
        sa.Column('last_message_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['agent_id'], ['agents.id']),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id']),
        sa.ForeignKeyConstraint(['active_user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'uq_conversations_agent_phone_key',
        'conversations',
        ['agent_id', 'client_phone_key'],
        unique=True,
        postgresql_where=sa.text("status != 'ARCHIVED'"),
    )
    op.create_index('ix_conversations_last_message_at', 'conversations', ['last_message_at'], unique=False)
    op.create_index('ix_conversations_status', 'conversations', ['status'], unique=False)
    op.create_index('ix_conversations_organization_id', 'conversations', ['organization_id'], unique=False)

    op.create_table('messages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('conversation_id', sa.Uuid(), nullable=False),
        sa.Column('sender_type', sender_type, nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('sender_name', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['conversation_id'], ['conversations.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_messages_conversation_created', 'messages', ['conversation_id', 'created_at'], unique=False)

    op.create_table('audit_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('conversation_id', sa.Uuid(), nullable=True),
        sa.Column('agent_id', sa.Uuid(), nullable=True),
        sa.Column('action', audit_action, nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['conversation_id'], ['conversations.id']),
        sa.ForeignKeyConstraint(['agent_id'], ['agents.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_audit_logs_created_at', table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_index('ix_messages_conversation_created', table_name='messages')
    op.drop_table('messages')
    op.drop_index('ix_conversations_organization_id', table_name='conversations')
    op.drop_index('ix_conversations_status', table_name='conversations')
    op.drop_index('ix_conversations_last_message_at', table_name='conversations')
    op.drop_index('uq_conversations_agent_phone_key', table_name='conversations')
    op.drop_table('conversations')
    op.drop_index('ix_agents_organization_id', table_name='agents')
    op.drop_table('agents')
    op.drop_table('users')
    op.drop_table('organizations')

    # Drop the enum types
    for enum in (audit_action, sender_type, conversation_status, webhook_auth, user_role):
        enum.drop(op.get_bind(), checkfirst=True)
