from enum import Enum as PyEnum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from messenger.db.database import Base


class ListType(str, PyEnum):
    """Типы списков пользователя"""
    CONTACT = "contact"  # Список контактов
    BLOCK = "block"      # Список заблокированных


# Связующая таблица списков и их участников (многие-ко-многим)
user_list_members = Table(
    "user_list_members",
    Base.metadata,
    Column("list_id", Integer, ForeignKey("user_lists.id"), primary_key=True),
    Column("member_login", String(50), ForeignKey("users.login"), primary_key=True)
)


class UserList(Base):
    """Список контактов или заблокированных, принадлежит ровно одному пользователю"""
    __tablename__ = "user_lists"

    id = Column(Integer, primary_key=True, autoincrement=True)
    list_type = Column(Enum(ListType, name="list_type", values_callable=lambda e: [m.value for m in e]), nullable=False)


class User(Base):
    """Модель пользователя мессенджера"""
    __tablename__ = "users"

    login = Column(String(50), primary_key=True)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    status = Column(String(140), nullable=False, default="")
    contact_list_id = Column(Integer, ForeignKey("user_lists.id"), nullable=False, unique=True)
    block_list_id = Column(Integer, ForeignKey("user_lists.id"), nullable=False, unique=True)

    # Отношения
    contact_list = relationship("UserList", foreign_keys=[contact_list_id])
    block_list = relationship("UserList", foreign_keys=[block_list_id])
