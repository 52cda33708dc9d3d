"""
Схемы для работы с сессией пользователя в консоли
"""
from typing import Optional

from pydantic import BaseModel, Field


class UserSession(BaseModel):
    """Аутентифицированный контекст: текущий пользователь и открытый чат"""
    login: str
    chat_id: Optional[int] = Field(
        default=None,
        description="ID открытого чата, если пользователь находится в меню чата"
    )
