# Импорт всех моделей для удобного доступа
from messenger.db.models.chat import Chat, ChatType, chat_members
from messenger.db.models.message import MediaAttachment, Message, notifications
from messenger.db.models.user import ListType, User, UserList, user_list_members

# Экспорт моделей для использования из других модулей
__all__ = [
    "User",
    "UserList",
    "ListType",
    "user_list_members",
    "Chat",
    "ChatType",
    "chat_members",
    "Message",
    "MediaAttachment",
    "notifications"
]
