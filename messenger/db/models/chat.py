from enum import Enum as PyEnum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from messenger.db.database import Base


class ChatType(str, PyEnum):
    """Типы чатов в системе"""
    PRIVATE = "private"  # Чат инициатора с одним собеседником
    GROUP = "group"      # Чат с несколькими приглашенными участниками


# Связующая таблица для пользователей и чатов (многие-ко-многим)
chat_members = Table(
    "chat_members",
    Base.metadata,
    Column("chat_id", Integer, ForeignKey("chats.id"), primary_key=True),
    Column("member_login", String(50), ForeignKey("users.login"), primary_key=True)
)


class Chat(Base):
    """Модель чата"""
    __tablename__ = "chats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    chat_type = Column(Enum(ChatType, name="chat_type", values_callable=lambda e: [m.value for m in e]), nullable=False, default=ChatType.PRIVATE)
    # Становится NULL после удаления аккаунта инициатора
    initiator_login = Column(String(50), ForeignKey("users.login"), nullable=True)

    # Отношения
    messages = relationship("Message", back_populates="chat")
