from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from messenger.core.exceptions import (
    AccessDeniedError,
    ConstraintViolationError,
    InvalidInputError,
    NotFoundError,
)
from messenger.core.logging import get_logger
from messenger.core.performance import async_time_it
from messenger.db.models.chat import ChatType
from messenger.db.repositories.chat import ChatRepository
from messenger.db.repositories.message import MessageRepository
from messenger.db.repositories.user import UserRepository
from messenger.schemas.chat import ChatActivity, ChatCreate

# Получение логгера
logger = get_logger("chat_service")


class ChatService:
    """Сервис для работы с чатами и их участниками"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.chat_repo = ChatRepository(db)
        self.user_repo = UserRepository(db)
        self.message_repo = MessageRepository(db)

    @async_time_it
    async def start_chat(self, initiator_login: str, chat_data: Optional[ChatCreate] = None) -> int:
        """
        Создание чата, инициатор становится первым участником

        Чат с несколькими приглашенными создается групповым.

        Returns:
            ID созданного чата
        """
        members = [m for m in (chat_data.members if chat_data else []) if m != initiator_login]
        logger.info(f"Создание чата пользователем {initiator_login} с участниками {members}")

        # Проверка существования всех приглашенных и блокировок
        for member in members:
            await self._check_can_invite(initiator_login, member)

        chat_type = ChatType.GROUP if len(members) > 1 else ChatType.PRIVATE
        async with self.chat_repo.atomic("создание чата"):
            chat_id = await self.chat_repo.create_chat(chat_type, initiator_login)
            await self.chat_repo.add_member(chat_id, initiator_login)
            for member in members:
                await self.chat_repo.add_member(chat_id, member)

        logger.info(f"Создан чат {chat_id} ({chat_type.value})")
        return chat_id

    async def open_chat(self, login: str, chat_id: int) -> int:
        """
        Проверка, что пользователь может открыть чат

        Raises:
            NotFoundError: Чат не найден или пользователь не является участником
        """
        if not await self.chat_repo.is_member(chat_id, login):
            logger.warning(f"Пользователь {login} пытается открыть чат {chat_id} без участия в нем")
            raise NotFoundError(f"Чат {chat_id} не найден")
        return chat_id

    async def add_member(self, chat_id: int, login: str, acting_login: str) -> None:
        """
        Добавление пользователя в чат

        Raises:
            NotFoundError: Чат или пользователь не найден
            ConstraintViolationError: Пользователь уже в чате
            AccessDeniedError: Пользователь заблокировал приглашающего
        """
        login = login.strip()
        logger.info(f"Добавление пользователя {login} в чат {chat_id} пользователем {acting_login}")
        await self._get_chat(chat_id)
        await self._check_can_invite(acting_login, login)

        if await self.chat_repo.is_member(chat_id, login):
            logger.warning(f"Пользователь {login} уже состоит в чате {chat_id}")
            raise ConstraintViolationError(f"Пользователь {login} уже состоит в этом чате")

        async with self.chat_repo.atomic("добавление участника"):
            await self.chat_repo.add_member(chat_id, login)
        logger.info(f"Пользователь {login} добавлен в чат {chat_id}")

    async def remove_member(self, chat_id: int, login: str) -> None:
        """
        Удаление пользователя из чата

        Raises:
            NotFoundError: Пользователь не состоит в чате
        """
        login = login.strip()
        if not await self.chat_repo.is_member(chat_id, login):
            logger.warning(f"Попытка удалить из чата {chat_id} пользователя {login}, который в нем не состоит")
            raise NotFoundError(f"Пользователь {login} не состоит в этом чате")

        async with self.chat_repo.atomic("удаление участника"):
            await self.chat_repo.remove_member(chat_id, login)
        logger.info(f"Пользователь {login} удален из чата {chat_id}")

    @async_time_it
    async def delete_chat(self, chat_id: int) -> None:
        """
        Удаление чата: участники, затем сообщения, затем сам чат

        Raises:
            NotFoundError: Чат не найден
        """
        await self._get_chat(chat_id)
        async with self.chat_repo.atomic("удаление чата"):
            await self.chat_repo.delete_members(chat_id)
            deleted_messages = await self.message_repo.delete_by_chat(chat_id)
            await self.chat_repo.delete(chat_id)
        logger.info(f"Чат {chat_id} удален вместе с {deleted_messages} сообщениями")

    async def list_user_chats(self, login: str) -> List[ChatActivity]:
        """Чаты пользователя по времени последнего сообщения"""
        rows = await self.chat_repo.get_user_chats(login)
        return [ChatActivity(chat_id=chat_id, last_activity=last) for chat_id, last in rows]

    async def list_members(self, chat_id: int) -> List[str]:
        """Логины участников чата"""
        return await self.chat_repo.get_members(chat_id)

    async def _get_chat(self, chat_id: int):
        chat = await self.chat_repo.get_by_id(chat_id)
        if not chat:
            logger.warning(f"Обращение к несуществующему чату {chat_id}")
            raise NotFoundError(f"Чат {chat_id} не найден")
        return chat

    async def _check_can_invite(self, acting_login: str, login: str) -> None:
        if not login:
            raise InvalidInputError("Логин не должен быть пустым")
        if not await self.user_repo.exists(login):
            logger.warning(f"Попытка пригласить в чат несуществующего пользователя {login}")
            raise NotFoundError(f"Пользователь {login} не найден")
        if await self.user_repo.is_blocked_by(login, acting_login):
            logger.warning(f"Пользователь {login} заблокировал {acting_login}, приглашение отклонено")
            raise AccessDeniedError(f"Пользователь {login} ограничил приглашения от вас")
