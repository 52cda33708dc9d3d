from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from messenger.core.logging import get_logger
from messenger.db.repositories.notification import NotificationRepository

# Получение логгера
logger = get_logger("notification_service")


class NotificationService:
    """Сервис очереди уведомлений"""

    def __init__(self, db: AsyncSession):
        self.notification_repo = NotificationRepository(db)

    async def list_notifications(self, owner_login: str) -> List[int]:
        """ID сообщений из ожидающих уведомлений, без удаления"""
        return await self.notification_repo.get_for_owner(owner_login)

    async def read_notifications(self, owner_login: str) -> List[int]:
        """
        Чтение уведомлений с очисткой очереди

        Повторный вызов вернет пустой список, пока не придут новые уведомления.
        """
        async with self.notification_repo.atomic("чтение уведомлений"):
            message_ids = await self.notification_repo.get_for_owner(owner_login)
            await self.notification_repo.delete_for_owner(owner_login)
        logger.info(f"Пользователь {owner_login} прочитал {len(message_ids)} уведомлений")
        return message_ids

    async def notify(self, owner_login: str, message_id: int) -> None:
        """Постановка уведомления о сообщении в очередь пользователя"""
        async with self.notification_repo.atomic("создание уведомления"):
            await self.notification_repo.add(owner_login, message_id)
