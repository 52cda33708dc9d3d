from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from messenger.core.exceptions import (
    ConstraintViolationError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from messenger.core.logging import get_logger
from messenger.core.performance import AsyncPerformanceTracker, async_time_it
from messenger.core.security import get_password_hash, verify_password
from messenger.db.models.user import ListType, User
from messenger.db.repositories.chat import ChatRepository
from messenger.db.repositories.message import MessageRepository
from messenger.db.repositories.notification import NotificationRepository
from messenger.db.repositories.user import UserRepository
from messenger.schemas.session import UserSession
from messenger.schemas.user import ContactResponse, UserCreate

# Получение логгера
logger = get_logger(__name__)


class UserService:
    """Сервис для работы с пользователями, контактами и блокировками"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)
        self.chat_repo = ChatRepository(db)
        self.message_repo = MessageRepository(db)
        self.notification_repo = NotificationRepository(db)

    @async_time_it
    async def create_user(self, user_in: UserCreate) -> str:
        """
        Создание пользователя с пустыми списками контактов и заблокированных

        Returns:
            Логин созданного пользователя

        Raises:
            ConstraintViolationError: Если логин уже занят
        """
        # Проверка наличия пользователя с таким логином
        async with AsyncPerformanceTracker("Проверка существования логина"):
            if await self.user_repo.exists(user_in.login):
                logger.warning(f"Попытка создать пользователя с существующим логином: {user_in.login}")
                raise ConstraintViolationError("Пользователь с таким логином уже существует")

        # Хеширование пароля
        hashed_password = get_password_hash(user_in.password)

        async with self.user_repo.atomic("создание пользователя"):
            block_list_id = await self.user_repo.create_list(ListType.BLOCK)
            contact_list_id = await self.user_repo.create_list(ListType.CONTACT)
            await self.user_repo.create(
                login=user_in.login,
                password_hash=hashed_password,
                phone=user_in.phone,
                status=user_in.status,
                contact_list_id=contact_list_id,
                block_list_id=block_list_id,
            )

        logger.info(f"Создан новый пользователь: {user_in.login}")
        return user_in.login

    @async_time_it
    async def authenticate_user(self, login: str, password: str) -> UserSession:
        """
        Аутентификация пользователя

        Raises:
            UnauthorizedError: Если пользователь не найден или пароль неверен
        """
        async with AsyncPerformanceTracker("Получение пользователя по логину"):
            user = await self.user_repo.get_by_login(login)
            if not user:
                logger.warning(f"Попытка аутентификации с несуществующим логином: {login}")
                raise UnauthorizedError("Неверный логин или пароль")

        async with AsyncPerformanceTracker("Проверка пароля"):
            if not verify_password(password, user.password_hash):
                logger.warning(f"Попытка аутентификации с неверным паролем для пользователя: {login}")
                raise UnauthorizedError("Неверный логин или пароль")

        logger.info(f"Успешная аутентификация пользователя: {login}")
        return UserSession(login=user.login)

    async def add_contact(self, owner_login: str, target_login: str) -> None:
        """Добавление пользователя в список контактов"""
        await self._add_to_list(owner_login, target_login, ListType.CONTACT)

    async def add_block(self, owner_login: str, target_login: str) -> None:
        """Добавление пользователя в список заблокированных"""
        await self._add_to_list(owner_login, target_login, ListType.BLOCK)

    async def _add_to_list(self, owner_login: str, target_login: str, list_type: ListType) -> None:
        """
        Добавление пользователя в один из списков владельца

        Raises:
            InvalidInputError: Попытка добавить самого себя
            NotFoundError: Пользователь не найден
            ConstraintViolationError: Пользователь уже в списке
        """
        target_login = target_login.strip()
        if not target_login:
            raise InvalidInputError("Логин не должен быть пустым")
        if target_login == owner_login:
            raise InvalidInputError("Нельзя добавить в список самого себя")

        owner = await self._get_user(owner_login)
        if not await self.user_repo.exists(target_login):
            logger.warning(f"Попытка добавить несуществующего пользователя {target_login} в список {list_type.value}")
            raise NotFoundError(f"Пользователь {target_login} не найден")

        list_id = owner.contact_list_id if list_type == ListType.CONTACT else owner.block_list_id
        if await self.user_repo.is_list_member(list_id, target_login):
            logger.warning(f"Пользователь {target_login} уже в списке {list_type.value} пользователя {owner_login}")
            raise ConstraintViolationError(f"Пользователь {target_login} уже есть в списке")

        async with self.user_repo.atomic("добавление в список"):
            await self.user_repo.add_list_member(list_id, target_login)
        logger.info(f"Пользователь {target_login} добавлен в список {list_type.value} пользователя {owner_login}")

    async def list_contacts(self, owner_login: str) -> List[ContactResponse]:
        """Список контактов со статусами"""
        rows = await self.user_repo.get_contacts(owner_login)
        return [ContactResponse(login=login, status=status) for login, status in rows]

    async def list_blocked(self, owner_login: str) -> List[str]:
        """Список заблокированных"""
        return await self.user_repo.get_blocked(owner_login)

    @async_time_it
    async def delete_account(self, owner_login: str) -> None:
        """
        Удаление аккаунта

        Удаляются сообщения пользователя, его уведомления, списки и участие
        в чатах. Чаты, созданные пользователем, остаются без инициатора;
        чаты, в которых не осталось участников, удаляются целиком.

        Raises:
            NotFoundError: Пользователь не найден
        """
        user = await self._get_user(owner_login)

        async with self.user_repo.atomic("удаление аккаунта"):
            chat_ids = await self.chat_repo.get_member_chat_ids(owner_login)
            await self.message_repo.delete_by_sender(owner_login)
            await self.notification_repo.delete_for_owner(owner_login)
            await self.chat_repo.remove_user_everywhere(owner_login)
            await self.chat_repo.clear_initiator(owner_login)

            for chat_id in chat_ids:
                if not await self.chat_repo.get_members(chat_id):
                    logger.info(f"Удаление чата {chat_id}, в котором не осталось участников")
                    await self.message_repo.delete_by_chat(chat_id)
                    await self.chat_repo.delete(chat_id)

            await self.user_repo.delete(user)

        logger.info(f"Аккаунт {owner_login} удален")

    async def _get_user(self, login: str) -> User:
        user = await self.user_repo.get_by_login(login)
        if not user:
            raise NotFoundError(f"Пользователь {login} не найден")
        return user
