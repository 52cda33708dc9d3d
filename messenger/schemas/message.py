"""
Схемы для работы с сообщениями и вложениями
"""
from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from messenger.core.config import settings


class AttachmentCreate(BaseModel):
    """Вложение к сообщению"""

    media_type: str = Field(..., min_length=1, max_length=20)
    url: str = Field(..., min_length=1, max_length=512)

    @field_validator("media_type")
    @classmethod
    def normalize_media_type(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Проверяет схему URL вложения"""
        v = v.strip()
        parsed = urlparse(v)
        if parsed.scheme not in settings.ALLOWED_MEDIA_URL_SCHEMES or not parsed.netloc:
            raise ValueError(f"Некорректный URL вложения: {v}")
        return v


class MessageCreate(BaseModel):
    """Создание нового сообщения"""

    model_config = ConfigDict(extra="forbid")

    text: str = Field(..., min_length=1)
    expires_at: Optional[datetime] = None  # Время самоуничтожения
    attachments: List[AttachmentCreate] = Field(default_factory=list)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """Проверяет длину текста сообщения"""
        if not v.strip():
            raise ValueError("Сообщение не должно быть пустым")
        if len(v) > settings.MAX_MESSAGE_LENGTH:
            raise ValueError(
                f"Текст сообщения слишком длинный (максимум {settings.MAX_MESSAGE_LENGTH} символов)"
            )
        return v


class MessageView(BaseModel):
    """Строка ленты сообщений: сообщение и, если есть, одно вложение"""

    model_config = ConfigDict(from_attributes=True)

    message_id: int
    sender_login: str
    created_at: datetime
    text: str
    media_type: Optional[str] = None
    url: Optional[str] = None
