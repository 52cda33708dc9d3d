from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Type, TypeVar

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.core.exceptions import ConstraintViolationError
from messenger.core.logging import get_logger

# Создаем типизированную переменную для моделей
T = TypeVar('T')

# Получение логгера
logger = get_logger("base_repository")


class BaseRepository:
    """Базовый репозиторий с общими методами для всех моделей"""

    def __init__(self, db: AsyncSession, model: Type[T]):
        """
        Инициализация репозитория

        Args:
            db: Сессия базы данных
            model: Класс модели, с которой работает репозиторий
        """
        self.db = db
        self.model = model

    async def get_by_id(self, id: int) -> Optional[T]:
        """
        Получение объекта по его ID

        Args:
            id: Идентификатор объекта

        Returns:
            Найденный объект или None, если объект не найден
        """
        stmt = select(self.model).filter(self.model.id == id).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_returning_id(self, **values) -> int:
        """
        Вставка строки с получением сгенерированного ID одним запросом

        Args:
            values: Значения столбцов

        Returns:
            ID созданной строки
        """
        stmt = insert(self.model).values(**values).returning(self.model.id)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    def atomic(self, operation: str):
        """Транзакция для группы изменений репозитория"""
        return atomic(self.db, operation)


@asynccontextmanager
async def atomic(db: AsyncSession, operation: str) -> AsyncIterator[None]:
    """
    Выполнение группы изменений в одной транзакции

    При любой ошибке транзакция откатывается. IntegrityError
    преобразуется в ConstraintViolationError.

    Args:
        db: Сессия базы данных
        operation: Название операции для логов и сообщения об ошибке
    """
    try:
        yield
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Нарушение целостности данных при операции '{operation}': {e.orig}")
        raise ConstraintViolationError(
            f"Операция '{operation}' нарушает ограничения целостности данных"
        ) from e
    except Exception:
        await db.rollback()
        raise
