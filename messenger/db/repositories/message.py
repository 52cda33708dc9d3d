from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from messenger.core.logging import get_logger
from messenger.db.models.message import MediaAttachment, Message, notifications
from messenger.db.repositories.base import BaseRepository

# Получение логгера
logger = get_logger("message_repository")


class MessageRepository(BaseRepository):
    """Репозиторий для работы с сообщениями и вложениями"""

    def __init__(self, db: AsyncSession):
        """
        Инициализация репозитория сообщений

        Args:
            db: Сессия базы данных
        """
        super().__init__(db, Message)

    async def create_message(
        self,
        chat_id: int,
        sender_login: str,
        text: str,
        created_at: datetime,
        expires_at: Optional[datetime] = None,
    ) -> int:
        """
        Сохранение сообщения

        Args:
            chat_id: ID чата
            sender_login: Логин отправителя
            text: Текст сообщения
            created_at: Время создания
            expires_at: Время самоуничтожения

        Returns:
            ID созданного сообщения
        """
        logger.debug(f"Создание нового сообщения от пользователя {sender_login} в чате {chat_id}")
        return await self.insert_returning_id(
            chat_id=chat_id,
            sender_login=sender_login,
            text=text,
            created_at=created_at,
            expires_at=expires_at,
        )

    async def add_attachment(self, message_id: int, media_type: str, url: str) -> int:
        """
        Прикрепление медиа к сообщению

        Returns:
            ID вложения
        """
        logger.debug(f"Добавление вложения {media_type} к сообщению {message_id}")
        stmt = insert(MediaAttachment).values(
            message_id=message_id, media_type=media_type, url=url
        ).returning(MediaAttachment.id)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def get_chat_messages(self, chat_id: int, limit: int = 10, offset: int = 0) -> list:
        """
        Получение страницы сообщений чата вместе с вложениями

        Сообщение без вложений дает одну строку с пустыми полями медиа,
        сообщение с несколькими вложениями - по строке на вложение.

        Args:
            chat_id: ID чата
            limit: Размер страницы (по умолчанию 10)
            offset: Смещение для пагинации (по умолчанию 0)

        Returns:
            Строки (id, sender_login, created_at, text, media_type, url), новые сверху
        """
        logger.debug(f"Получение сообщений чата {chat_id} с limit={limit}, offset={offset}")
        stmt = select(
            Message.id,
            Message.sender_login,
            Message.created_at,
            Message.text,
            MediaAttachment.media_type,
            MediaAttachment.url,
        ).outerjoin(
            MediaAttachment, MediaAttachment.message_id == Message.id
        ).filter(
            Message.chat_id == chat_id
        ).order_by(
            Message.created_at.desc(),
            Message.id.desc(),
            MediaAttachment.id.asc(),
        ).limit(limit).offset(offset)

        result = await self.db.execute(stmt)
        return result.all()

    async def update_text(self, message: Message, text: str) -> Message:
        """
        Изменение текста сообщения

        Args:
            message: Сообщение
            text: Новый текст

        Returns:
            Обновленный объект сообщения
        """
        logger.debug(f"Изменение текста сообщения {message.id}")
        message.text = text
        await self.db.flush()
        return message

    async def _delete_where(self, condition: ColumnElement) -> int:
        """
        Удаление сообщений по условию вместе с вложениями и уведомлениями

        Returns:
            Количество удаленных сообщений
        """
        message_ids = select(Message.id).where(condition)
        await self.db.execute(
            delete(MediaAttachment).where(
                MediaAttachment.message_id.in_(message_ids)
            ).execution_options(synchronize_session=False)
        )
        await self.db.execute(delete(notifications).where(notifications.c.message_id.in_(message_ids)))
        result = await self.db.execute(
            delete(Message).where(condition).execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete(self, message_id: int) -> int:
        """Удаление сообщения по ID"""
        logger.debug(f"Удаление сообщения {message_id}")
        return await self._delete_where(Message.id == message_id)

    async def delete_by_chat(self, chat_id: int) -> int:
        """Удаление всех сообщений чата"""
        logger.debug(f"Удаление всех сообщений чата {chat_id}")
        return await self._delete_where(Message.chat_id == chat_id)

    async def delete_by_sender(self, sender_login: str) -> int:
        """Удаление всех сообщений пользователя"""
        logger.debug(f"Удаление всех сообщений пользователя {sender_login}")
        return await self._delete_where(Message.sender_login == sender_login)

    async def delete_expired(self, now: datetime) -> int:
        """
        Удаление сообщений с истекшим временем самоуничтожения

        Args:
            now: Текущее время

        Returns:
            Количество удаленных сообщений
        """
        return await self._delete_where(
            Message.expires_at.is_not(None) & (Message.expires_at < now)
        )

    async def get_attachments(self, message_id: int) -> List[MediaAttachment]:
        """Вложения сообщения"""
        result = await self.db.execute(
            select(MediaAttachment).filter(
                MediaAttachment.message_id == message_id
            ).order_by(MediaAttachment.id)
        )
        return list(result.scalars().all())
