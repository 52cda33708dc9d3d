# Импорт всех репозиториев для удобного доступа
from messenger.db.repositories.base import BaseRepository
from messenger.db.repositories.chat import ChatRepository
from messenger.db.repositories.message import MessageRepository
from messenger.db.repositories.notification import NotificationRepository
from messenger.db.repositories.user import UserRepository

# Экспорт репозиториев для использования из других модулей
__all__ = [
    "BaseRepository",
    "UserRepository",
    "ChatRepository",
    "MessageRepository",
    "NotificationRepository"
]
