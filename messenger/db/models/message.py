from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from messenger.db.database import Base


class Message(Base):
    """Модель сообщения в чате"""
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    chat_id = Column(Integer, ForeignKey("chats.id"), nullable=False, index=True)
    sender_login = Column(String(50), ForeignKey("users.login"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    # Время самоуничтожения, NULL - сообщение хранится бессрочно
    expires_at = Column(DateTime, nullable=True, index=True)

    # Отношения
    chat = relationship("Chat", back_populates="messages")
    attachments = relationship("MediaAttachment", back_populates="message")


class MediaAttachment(Base):
    """Медиа-вложение к сообщению"""
    __tablename__ = "media_attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    message_id = Column(Integer, ForeignKey("messages.id"), nullable=False, index=True)
    media_type = Column(String(20), nullable=False)
    url = Column(String(512), nullable=False)

    # Отношения
    message = relationship("Message", back_populates="attachments")


# Очередь уведомлений: владелец и сообщение, о котором он уведомлен
notifications = Table(
    "notifications",
    Base.metadata,
    Column("owner_login", String(50), ForeignKey("users.login"), primary_key=True),
    Column("message_id", Integer, ForeignKey("messages.id"), primary_key=True)
)
