"""
Модуль настроек приложения
"""
import logging
from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Настройки приложения"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Основные настройки проекта
    PROJECT_NAME: str = "Console Messenger"
    PROJECT_DESCRIPTION: str = "Консольный мессенджер: контакты, чаты, сообщения и уведомления"
    PROJECT_VERSION: str = "1.0.0"

    # Настройки окружения
    ENVIRONMENT: str = "development"
    DEBUG: bool = Field(default=False)

    # Настройки базы данных (имя БД, порт и пользователь приходят из командной строки)
    DATABASE_DRIVER: str = "postgresql+asyncpg"
    DATABASE_HOST: str = "localhost"
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_ECHO: bool = False

    # Настройки логирования
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DIR: str = "./logs"
    LOG_TO_FILE: bool = True
    CONSOLE_LOG_LEVEL: str = "WARNING"

    # Настройки сообщений
    MESSAGES_PAGE_SIZE: int = 10
    MAX_MESSAGE_LENGTH: int = 4000
    ALLOWED_MEDIA_URL_SCHEMES: Union[List[str], str] = Field(
        default=["http", "https", "ftp", "s3"]
    )
    NOTIFY_CHAT_MEMBERS: bool = True

    # Порог, после которого операция с хранилищем логируется как медленная
    SLOW_OPERATION_THRESHOLD_MS: float = 500.0

    # Настройки безопасности
    PASSWORD_HASH_SCHEMES: Union[List[str], str] = Field(default=["pbkdf2_sha256"])

    @field_validator("LOG_LEVEL", "CONSOLE_LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Проверяет, что уровень логирования существует"""
        level = str(v).upper()
        if not isinstance(getattr(logging, level, None), int):
            raise ValueError(f"Неизвестный уровень логирования: {v}")
        return level

    @field_validator("ALLOWED_MEDIA_URL_SCHEMES", "PASSWORD_HASH_SCHEMES", mode="before")
    @classmethod
    def assemble_list(cls, v: Union[str, List[str]]) -> List[str]:
        """Преобразует строку со списком через запятую в список"""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, list):
            return v
        raise ValueError(v)

    def build_database_uri(self, dbname: str, port: Union[str, int], user: str) -> str:
        """
        Формирует URL подключения к базе данных

        Args:
            dbname: Имя базы данных
            port: Порт сервера базы данных
            user: Пользователь базы данных

        Returns:
            str: URL для SQLAlchemy
        """
        credentials = user
        if self.DATABASE_PASSWORD:
            credentials = f"{user}:{self.DATABASE_PASSWORD}"
        return f"{self.DATABASE_DRIVER}://{credentials}@{self.DATABASE_HOST}:{port}/{dbname}"


# Создание объекта настроек
settings = Settings()

