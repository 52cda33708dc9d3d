from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from messenger.core.config import settings
from messenger.core.exceptions import StoreConnectionError
from messenger.core.logging import get_logger

# Получение логгера
logger = get_logger(__name__)

# Базовый класс для всех моделей
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """Включает проверку внешних ключей для SQLite (по умолчанию выключена)"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Подключение к хранилищу

    Создается точкой входа и явно передается контроллеру сессии.
    Владеет движком SQLAlchemy и фабрикой асинхронных сессий.
    """

    def __init__(self, url: str, echo: Optional[bool] = None, **engine_kwargs):
        """
        Инициализация подключения

        Args:
            url: URL базы данных для SQLAlchemy
            echo: Логирование SQL-запросов (по умолчанию из настроек)
            engine_kwargs: Дополнительные параметры create_async_engine
        """
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url,
            echo=settings.DATABASE_ECHO if echo is None else echo,
            **engine_kwargs,
        )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # Создание фабрики асинхронных сессий
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def check_connection(self) -> None:
        """
        Проверка доступности базы данных

        Raises:
            StoreConnectionError: Если подключиться не удалось
        """
        safe_url = self.url.split("@")[-1]
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Не удалось подключиться к базе данных ...@{safe_url}: {e}")
            raise StoreConnectionError(f"Не удалось подключиться к базе данных: {e}") from e
        logger.info(f"Соединение с базой данных ...@{safe_url} установлено")

    async def init_db(self) -> None:
        """
        Создание таблиц, если они не существуют
        """
        # Импорт моделей для регистрации таблиц в метаданных
        from messenger.db import models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"Ошибка при инициализации базы данных: {e}")
            raise StoreConnectionError(f"Ошибка при инициализации базы данных: {e}") from e
        logger.info("Инициализация базы данных завершена")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Сессия базы данных на время работы пользователя с консолью"""
        session = self.session_factory()
        try:
            yield session
        finally:
            await session.close()

    async def dispose(self) -> None:
        """Освобождение соединений"""
        await self.engine.dispose()
        logger.info("Соединение с базой данных закрыто")
