from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.core.logging import get_logger
from messenger.db.models.message import notifications
from messenger.db.repositories.base import atomic

# Получение логгера
logger = get_logger("notification_repository")


class NotificationRepository:
    """Репозиторий очереди уведомлений"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def atomic(self, operation: str):
        """Транзакция для группы изменений очереди"""
        return atomic(self.db, operation)

    async def add(self, owner_login: str, message_id: int) -> None:
        """Постановка уведомления в очередь пользователя"""
        logger.debug(f"Уведомление пользователя {owner_login} о сообщении {message_id}")
        await self.db.execute(notifications.insert().values(owner_login=owner_login, message_id=message_id))

    async def get_for_owner(self, owner_login: str) -> List[int]:
        """ID сообщений из ожидающих уведомлений пользователя"""
        stmt = select(notifications.c.message_id).where(
            notifications.c.owner_login == owner_login
        ).order_by(notifications.c.message_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def delete_for_owner(self, owner_login: str) -> int:
        """
        Удаление всех уведомлений пользователя

        Returns:
            Количество удаленных уведомлений
        """
        result = await self.db.execute(delete(notifications).where(notifications.c.owner_login == owner_login))
        return result.rowcount
