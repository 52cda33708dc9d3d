from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, field_validator


# Схема для создания чата с приглашенными участниками
class ChatCreate(BaseModel):
    members: List[str] = Field(default_factory=list)

    @field_validator("members")
    @classmethod
    def normalize_members(cls, v: List[str]) -> List[str]:
        """Удаляет пустые значения и повторы, сохраняя порядок"""
        result = []
        for login in (m.strip() for m in v):
            if login and login not in result:
                result.append(login)
        return result


# Строка списка чатов: чат и время последнего сообщения
class ChatActivity(BaseModel):
    chat_id: int
    last_activity: datetime
