"""Initial migration

Revision ID: 5c1e2b7d9a40
Revises: 
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c1e2b7d9a40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Списки контактов и заблокированных
    op.create_table(
        'user_lists',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('list_type', sa.Enum('contact', 'block', name='list_type'), nullable=False),
    )

    # Создание таблицы пользователей
    op.create_table(
        'users',
        sa.Column('login', sa.String(50), primary_key=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('status', sa.String(140), nullable=False, server_default=''),
        sa.Column('contact_list_id', sa.Integer, sa.ForeignKey('user_lists.id'), nullable=False, unique=True),
        sa.Column('block_list_id', sa.Integer, sa.ForeignKey('user_lists.id'), nullable=False, unique=True),
    )

    # Участники списков
    op.create_table(
        'user_list_members',
        sa.Column('list_id', sa.Integer, sa.ForeignKey('user_lists.id'), primary_key=True),
        sa.Column('member_login', sa.String(50), sa.ForeignKey('users.login'), primary_key=True),
    )

    # Создание таблицы чатов
    op.create_table(
        'chats',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('chat_type', sa.Enum('private', 'group', name='chat_type'), nullable=False),
        sa.Column('initiator_login', sa.String(50), sa.ForeignKey('users.login'), nullable=True),
    )

    # Создание связующей таблицы пользователей и чатов
    op.create_table(
        'chat_members',
        sa.Column('chat_id', sa.Integer, sa.ForeignKey('chats.id'), primary_key=True),
        sa.Column('member_login', sa.String(50), sa.ForeignKey('users.login'), primary_key=True),
    )

    # Создание таблицы сообщений
    op.create_table(
        'messages',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('chat_id', sa.Integer, sa.ForeignKey('chats.id'), nullable=False, index=True),
        sa.Column('sender_login', sa.String(50), sa.ForeignKey('users.login'), nullable=False),
        sa.Column('text', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now(), index=True),
        sa.Column('expires_at', sa.DateTime, nullable=True, index=True),
    )

    # Медиа-вложения
    op.create_table(
        'media_attachments',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('message_id', sa.Integer, sa.ForeignKey('messages.id'), nullable=False, index=True),
        sa.Column('media_type', sa.String(20), nullable=False),
        sa.Column('url', sa.String(512), nullable=False),
    )

    # Очередь уведомлений
    op.create_table(
        'notifications',
        sa.Column('owner_login', sa.String(50), sa.ForeignKey('users.login'), primary_key=True),
        sa.Column('message_id', sa.Integer, sa.ForeignKey('messages.id'), primary_key=True),
    )


def downgrade() -> None:
    # Удаление всех созданных таблиц в обратном порядке
    op.drop_table('notifications')
    op.drop_table('media_attachments')
    op.drop_table('messages')
    op.drop_table('chat_members')
    op.drop_table('chats')
    op.drop_table('user_list_members')
    op.drop_table('users')
    op.drop_table('user_lists')
    sa.Enum(name='chat_type').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='list_type').drop(op.get_bind(), checkfirst=True)
