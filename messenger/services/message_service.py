from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from messenger.core.config import settings
from messenger.core.exceptions import AccessDeniedError, InvalidInputError, NotFoundError
from messenger.core.logging import get_logger
from messenger.core.performance import AsyncPerformanceTracker, async_time_it
from messenger.db.models.message import Message
from messenger.db.repositories.chat import ChatRepository
from messenger.db.repositories.message import MessageRepository
from messenger.db.repositories.notification import NotificationRepository
from messenger.schemas.message import AttachmentCreate, MessageCreate, MessageView

# Получение логгера для этого модуля
logger = get_logger("message_service")


class MessageService:
    """Сервис для работы с сообщениями"""

    def __init__(self, db: AsyncSession, notify_members: Optional[bool] = None):
        self.message_repo = MessageRepository(db)
        self.chat_repo = ChatRepository(db)
        self.notification_repo = NotificationRepository(db)
        self.notify_members = settings.NOTIFY_CHAT_MEMBERS if notify_members is None else notify_members

    @async_time_it
    async def create_message(
        self,
        chat_id: int,
        sender_login: str,
        message_in: MessageCreate,
        now: Optional[datetime] = None,
    ) -> int:
        """
        Сохранение сообщения вместе с вложениями

        Остальные участники чата получают уведомление, если это включено
        в настройках.

        Args:
            chat_id: ID чата
            sender_login: Логин отправителя
            message_in: Данные сообщения
            now: Время создания (по умолчанию текущее)

        Returns:
            ID созданного сообщения

        Raises:
            NotFoundError: Чат не найден
            AccessDeniedError: Отправитель не является участником чата
        """
        logger.info(f"Сохранение сообщения от пользователя {sender_login} в чат {chat_id}")
        created_at = now or datetime.utcnow()

        # Проверка наличия чата и доступа пользователя к нему
        members = await self.chat_repo.get_members(chat_id)
        if not members:
            logger.warning(f"Попытка отправить сообщение в несуществующий чат {chat_id}")
            raise NotFoundError(f"Чат {chat_id} не найден")
        if sender_login not in members:
            logger.warning(f"Пользователь {sender_login} не имеет доступа к чату {chat_id}")
            raise AccessDeniedError("У вас нет доступа к этому чату")

        if message_in.expires_at is not None and message_in.expires_at <= created_at:
            raise InvalidInputError("Время самоуничтожения должно быть в будущем")

        async with self.message_repo.atomic("создание сообщения"):
            message_id = await self.message_repo.create_message(
                chat_id=chat_id,
                sender_login=sender_login,
                text=message_in.text,
                created_at=created_at,
                expires_at=message_in.expires_at,
            )
            for attachment in message_in.attachments:
                await self.message_repo.add_attachment(message_id, attachment.media_type, attachment.url)

            if self.notify_members:
                for member in members:
                    if member != sender_login:
                        await self.notification_repo.add(member, message_id)

        logger.info(f"Сообщение {message_id} сохранено в чате {chat_id}")
        return message_id

    async def attach_media(self, message_id: int, attachment: AttachmentCreate, chat_id: Optional[int] = None) -> int:
        """
        Прикрепление вложения к существующему сообщению

        Returns:
            ID вложения
        """
        await self._get_message(message_id, chat_id)
        async with self.message_repo.atomic("добавление вложения"):
            attachment_id = await self.message_repo.add_attachment(message_id, attachment.media_type, attachment.url)
        logger.info(f"К сообщению {message_id} добавлено вложение {attachment_id}")
        return attachment_id

    async def edit_message(
        self,
        message_id: int,
        editor_login: str,
        text: str,
        chat_id: Optional[int] = None,
    ) -> Message:
        """
        Изменение текста сообщения его отправителем

        Raises:
            NotFoundError: Сообщение не найдено
            AccessDeniedError: Редактирует не отправитель
            InvalidInputError: Текст пустой или слишком длинный
        """
        self._validate_text(text)
        message = await self._get_message(message_id, chat_id)
        if message.sender_login != editor_login:
            logger.warning(f"Пользователь {editor_login} пытается изменить чужое сообщение {message_id}")
            raise AccessDeniedError("Изменять сообщение может только его отправитель")

        async with self.message_repo.atomic("изменение сообщения"):
            message = await self.message_repo.update_text(message, text)
        logger.info(f"Сообщение {message_id} изменено")
        return message

    async def delete_message(self, message_id: int, chat_id: Optional[int] = None) -> None:
        """
        Удаление сообщения вместе с вложениями

        Raises:
            NotFoundError: Сообщение не найдено
        """
        await self._get_message(message_id, chat_id)
        async with self.message_repo.atomic("удаление сообщения"):
            await self.message_repo.delete(message_id)
        logger.info(f"Сообщение {message_id} удалено")

    @async_time_it
    async def view_messages(
        self,
        chat_id: int,
        offset: int = 0,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[MessageView]:
        """
        Страница ленты чата, новые сообщения сверху

        Перед чтением удаляются сообщения с истекшим сроком жизни.
        Для следующей страницы вызывающий увеличивает offset на limit.
        """
        limit = settings.MESSAGES_PAGE_SIZE if limit is None else limit
        if offset < 0 or limit < 1:
            raise InvalidInputError("Некорректные параметры пагинации")

        await self.sweep_expired(now)

        async with AsyncPerformanceTracker("Загрузка страницы сообщений"):
            rows = await self.message_repo.get_chat_messages(chat_id, limit=limit, offset=offset)
        logger.info(f"Получено {len(rows)} строк сообщений для чата {chat_id} (offset={offset})")

        return [MessageView(
            message_id=row.id,
            sender_login=row.sender_login,
            created_at=row.created_at,
            text=row.text,
            media_type=row.media_type,
            url=row.url
        ) for row in rows]

    async def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """
        Удаление сообщений, время самоуничтожения которых уже прошло

        Returns:
            Количество удаленных сообщений
        """
        now = now or datetime.utcnow()
        async with self.message_repo.atomic("удаление просроченных сообщений"):
            deleted = await self.message_repo.delete_expired(now)
        if deleted:
            logger.info(f"Удалено {deleted} просроченных сообщений")
        return deleted

    def _validate_text(self, text: str) -> None:
        """
        Валидация текста сообщения

        Raises:
            InvalidInputError: Если текст не проходит валидацию
        """
        if not text or not text.strip():
            raise InvalidInputError("Сообщение не должно быть пустым")
        if len(text) > settings.MAX_MESSAGE_LENGTH:
            raise InvalidInputError(
                f"Текст сообщения слишком длинный (максимум {settings.MAX_MESSAGE_LENGTH} символов)"
            )

    async def _get_message(self, message_id: int, chat_id: Optional[int] = None) -> Message:
        message = await self.message_repo.get_by_id(message_id)
        if not message or (chat_id is not None and message.chat_id != chat_id):
            logger.warning(f"Обращение к несуществующему сообщению {message_id}")
            raise NotFoundError(f"Сообщение {message_id} не найдено")
        return message
