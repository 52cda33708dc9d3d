"""
Замер длительности операций с хранилищем

Длительность пишется в лог на уровне DEBUG. Операции дольше
SLOW_OPERATION_THRESHOLD_MS попадают в лог как предупреждения, чтобы
медленные запросы было видно и без отладочного уровня.
"""
import functools
import time
from typing import Any, Callable, Optional, TypeVar

from messenger.core.config import settings
from messenger.core.logging import get_logger

# Получение логгера
logger = get_logger("performance")

AsyncF = TypeVar('AsyncF', bound=Callable[..., Any])


def report_duration(operation: str, elapsed: float, threshold_ms: Optional[float] = None) -> None:
    """
    Запись длительности операции в лог

    Args:
        operation: Название операции
        elapsed: Длительность в секундах
        threshold_ms: Порог медленной операции (по умолчанию из настроек)
    """
    threshold_ms = settings.SLOW_OPERATION_THRESHOLD_MS if threshold_ms is None else threshold_ms
    elapsed_ms = elapsed * 1000
    if elapsed_ms >= threshold_ms:
        logger.warning(f"Медленная операция '{operation}': {elapsed_ms:.1f} мс (порог {threshold_ms:.0f} мс)")
    else:
        logger.debug(f"Операция '{operation}' заняла {elapsed_ms:.1f} мс")


def async_time_it(func: AsyncF) -> AsyncF:
    """Замер длительности вызова метода сервиса, включая вызовы с ошибкой"""
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        started = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            report_duration(func.__qualname__, time.perf_counter() - started)

    return wrapper  # type: ignore


class AsyncPerformanceTracker:
    """
    Замер длительности блока внутри операции

    async with AsyncPerformanceTracker("Загрузка страницы сообщений"):
        rows = await message_repo.get_chat_messages(chat_id)
    """

    def __init__(self, operation: str, threshold_ms: Optional[float] = None):
        self.operation = operation
        self.threshold_ms = threshold_ms
        self.elapsed: Optional[float] = None
        self._started = 0.0

    async def __aenter__(self) -> "AsyncPerformanceTracker":
        self._started = time.perf_counter()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.elapsed = time.perf_counter() - self._started
        report_duration(self.operation, self.elapsed, self.threshold_ms)
