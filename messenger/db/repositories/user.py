from typing import List, Optional, Tuple

from sqlalchemy import delete, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.core.logging import get_logger
from messenger.db.models.user import ListType, User, UserList, user_list_members
from messenger.db.repositories.base import BaseRepository

# Получение логгера
logger = get_logger("user_repository")


class UserRepository(BaseRepository):
    """Репозиторий для работы с пользователями и их списками"""

    def __init__(self, db: AsyncSession):
        """
        Инициализация репозитория пользователей

        Args:
            db: Сессия базы данных
        """
        super().__init__(db, User)

    async def get_by_login(self, login: str) -> Optional[User]:
        """
        Получение пользователя по логину

        Args:
            login: Логин пользователя

        Returns:
            Найденный пользователь или None, если пользователь не найден
        """
        logger.debug(f"Поиск пользователя с логином: {login}")
        stmt = select(User).filter(User.login == login).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, login: str) -> bool:
        """Проверка существования пользователя"""
        result = await self.db.execute(select(User.login).filter(User.login == login))
        return result.scalar_one_or_none() is not None

    async def create_list(self, list_type: ListType) -> int:
        """
        Создание пустого списка

        Args:
            list_type: Тип списка (контакты или заблокированные)

        Returns:
            ID созданного списка
        """
        stmt = insert(UserList).values(list_type=list_type).returning(UserList.id)
        result = await self.db.execute(stmt)
        list_id = result.scalar_one()
        logger.debug(f"Создан список {list_type.value} с ID {list_id}")
        return list_id

    async def create(
        self,
        login: str,
        password_hash: str,
        phone: str,
        status: str,
        contact_list_id: int,
        block_list_id: int,
    ) -> None:
        """Вставка строки пользователя, ссылающейся на оба его списка"""
        logger.debug(f"Создание пользователя {login}")
        await self.db.execute(
            insert(User).values(
                login=login,
                password_hash=password_hash,
                phone=phone,
                status=status,
                contact_list_id=contact_list_id,
                block_list_id=block_list_id,
            )
        )

    async def add_list_member(self, list_id: int, member_login: str) -> None:
        """
        Добавление пользователя в список

        Args:
            list_id: ID списка
            member_login: Логин добавляемого пользователя
        """
        logger.debug(f"Добавление пользователя {member_login} в список {list_id}")
        stmt = user_list_members.insert().values(list_id=list_id, member_login=member_login)
        await self.db.execute(stmt)

    async def is_list_member(self, list_id: int, member_login: str) -> bool:
        """Проверка, состоит ли пользователь в списке"""
        stmt = select(user_list_members.c.list_id).where(
            user_list_members.c.list_id == list_id,
            user_list_members.c.member_login == member_login
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def count_list_members(self, list_id: int) -> int:
        """Количество участников списка"""
        stmt = select(user_list_members.c.member_login).where(user_list_members.c.list_id == list_id)
        result = await self.db.execute(stmt)
        return len(result.all())

    async def get_contacts(self, owner_login: str) -> List[Tuple[str, str]]:
        """
        Получение списка контактов пользователя со статусами

        Args:
            owner_login: Логин владельца списка

        Returns:
            Список пар (логин, статус)
        """
        logger.debug(f"Получение контактов пользователя {owner_login}")
        contact_list = select(User.contact_list_id).where(User.login == owner_login).scalar_subquery()
        stmt = select(User.login, User.status).join(
            user_list_members, user_list_members.c.member_login == User.login
        ).where(
            user_list_members.c.list_id == contact_list
        ).order_by(User.login)
        result = await self.db.execute(stmt)
        return [(row.login, row.status) for row in result]

    async def get_blocked(self, owner_login: str) -> List[str]:
        """
        Получение логинов из списка заблокированных

        Args:
            owner_login: Логин владельца списка

        Returns:
            Список логинов
        """
        logger.debug(f"Получение списка заблокированных пользователя {owner_login}")
        block_list = select(User.block_list_id).where(User.login == owner_login).scalar_subquery()
        stmt = select(user_list_members.c.member_login).where(
            user_list_members.c.list_id == block_list
        ).order_by(user_list_members.c.member_login)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def is_blocked_by(self, owner_login: str, member_login: str) -> bool:
        """
        Проверка, находится ли member_login в списке заблокированных owner_login
        """
        block_list = select(User.block_list_id).where(User.login == owner_login).scalar_subquery()
        stmt = select(user_list_members.c.list_id).where(
            user_list_members.c.list_id == block_list,
            user_list_members.c.member_login == member_login
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def delete(self, user: User) -> None:
        """
        Удаление пользователя вместе с его списками

        Удаляются также записи в чужих списках, ссылающиеся на пользователя.

        Args:
            user: Удаляемый пользователь
        """
        logger.debug(f"Удаление пользователя {user.login} и его списков")
        own_lists = [user.contact_list_id, user.block_list_id]
        await self.db.execute(
            delete(user_list_members).where(
                or_(
                    user_list_members.c.member_login == user.login,
                    user_list_members.c.list_id.in_(own_lists)
                )
            )
        )
        await self.db.execute(
            delete(User).where(User.login == user.login).execution_options(synchronize_session=False)
        )
        await self.db.execute(
            delete(UserList).where(UserList.id.in_(own_lists)).execution_options(synchronize_session=False)
        )
