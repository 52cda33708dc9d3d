from datetime import datetime
from typing import List, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from messenger.core.logging import get_logger
from messenger.db.models.chat import Chat, ChatType, chat_members
from messenger.db.models.message import Message
from messenger.db.repositories.base import BaseRepository

# Получение логгера
logger = get_logger("chat_repository")


class ChatRepository(BaseRepository):
    """Репозиторий для работы с чатами"""

    def __init__(self, db: AsyncSession):
        """
        Инициализация репозитория чатов

        Args:
            db: Сессия базы данных
        """
        super().__init__(db, Chat)

    async def create_chat(self, chat_type: ChatType, initiator_login: str) -> int:
        """
        Создание чата

        Args:
            chat_type: Тип чата
            initiator_login: Логин пользователя, создающего чат

        Returns:
            ID созданного чата
        """
        logger.info(f"Создание чата типа {chat_type.value} пользователем {initiator_login}")
        return await self.insert_returning_id(chat_type=chat_type, initiator_login=initiator_login)

    async def add_member(self, chat_id: int, login: str) -> None:
        """
        Добавление пользователя в чат

        Args:
            chat_id: ID чата
            login: Логин пользователя
        """
        logger.debug(f"Добавление пользователя {login} в чат {chat_id}")
        stmt = chat_members.insert().values(chat_id=chat_id, member_login=login)
        await self.db.execute(stmt)

    async def is_member(self, chat_id: int, login: str) -> bool:
        """Проверяет, является ли пользователь участником чата"""
        stmt = select(chat_members.c.chat_id).where(
            chat_members.c.chat_id == chat_id,
            chat_members.c.member_login == login
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def remove_member(self, chat_id: int, login: str) -> int:
        """
        Удаление пользователя из чата

        Returns:
            Количество удаленных записей участия
        """
        logger.debug(f"Удаление пользователя {login} из чата {chat_id}")
        stmt = delete(chat_members).where(
            chat_members.c.chat_id == chat_id,
            chat_members.c.member_login == login
        )
        result = await self.db.execute(stmt)
        return result.rowcount

    async def get_members(self, chat_id: int) -> List[str]:
        """Логины участников чата"""
        stmt = select(chat_members.c.member_login).where(
            chat_members.c.chat_id == chat_id
        ).order_by(chat_members.c.member_login)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_member_chat_ids(self, login: str) -> List[int]:
        """ID всех чатов, в которых состоит пользователь"""
        stmt = select(chat_members.c.chat_id).where(chat_members.c.member_login == login)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_user_chats(self, login: str) -> List[Tuple[int, datetime]]:
        """
        Получение чатов пользователя с временем последнего сообщения

        Чаты без сообщений в результат не попадают.

        Args:
            login: Логин пользователя

        Returns:
            Пары (ID чата, время последнего сообщения), новые сверху
        """
        logger.debug(f"Получение списка чатов пользователя {login}")
        last_activity = func.max(Message.created_at).label("last_activity")
        stmt = select(chat_members.c.chat_id, last_activity).join(
            Message, Message.chat_id == chat_members.c.chat_id
        ).where(
            chat_members.c.member_login == login
        ).group_by(
            chat_members.c.chat_id
        ).order_by(last_activity.desc(), chat_members.c.chat_id.desc())
        result = await self.db.execute(stmt)
        return [(row.chat_id, row.last_activity) for row in result]

    async def remove_user_everywhere(self, login: str) -> None:
        """Удаление пользователя из всех чатов"""
        await self.db.execute(delete(chat_members).where(chat_members.c.member_login == login))

    async def clear_initiator(self, login: str) -> None:
        """Отвязка чатов от инициатора при удалении его аккаунта"""
        await self.db.execute(
            update(Chat).where(Chat.initiator_login == login).values(
                initiator_login=None
            ).execution_options(synchronize_session=False)
        )

    async def delete_members(self, chat_id: int) -> None:
        """Удаление всех участников чата"""
        logger.debug(f"Удаление участников чата {chat_id}")
        await self.db.execute(delete(chat_members).where(chat_members.c.chat_id == chat_id))

    async def delete(self, chat_id: int) -> int:
        """
        Удаление строки чата

        Участники и сообщения чата должны быть удалены до вызова.

        Returns:
            Количество удаленных чатов
        """
        logger.debug(f"Удаление записи чата {chat_id}")
        result = await self.db.execute(
            delete(Chat).where(Chat.id == chat_id).execution_options(synchronize_session=False)
        )
        return result.rowcount
