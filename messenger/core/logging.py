import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from messenger.core.config import settings

# Настройка форматтеров для логов
file_formatter = logging.Formatter(settings.LOG_FORMAT)
console_formatter = logging.Formatter(
    "%(levelname)s: [%(name)s] %(message)s (%(asctime)s)"
)


# Настройка обработчиков для логов
def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Настройка логирования приложения

    Консольный обработчик пишет в stderr, чтобы не смешиваться с меню,
    которое выводится в stdout.

    Args:
        log_level: Уровень логирования (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Каталог для файлов логов (по умолчанию из настроек)
    """
    # Преобразование уровня логирования из строки
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    # Корневой логгер
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Очистка обработчиков, если они уже существуют
    root_logger.handlers.clear()

    # Обработчик для консоли
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(settings.CONSOLE_LOG_LEVEL)
    root_logger.addHandler(console_handler)

    if settings.LOG_TO_FILE:
        # Создание директории для логов, если ее нет
        directory = Path(log_dir or settings.LOG_DIR)
        directory.mkdir(parents=True, exist_ok=True)

        # Обработчик для файла
        log_file = directory / f"messenger_{datetime.now().strftime('%Y-%m-%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

        # Отдельный файл для ошибок
        error_file = directory / f"errors_{datetime.now().strftime('%Y-%m-%d')}.log"
        error_handler = logging.FileHandler(error_file, encoding="utf-8")
        error_handler.setFormatter(file_formatter)
        error_handler.setLevel(logging.ERROR)
        root_logger.addHandler(error_handler)

    # Логирование начала настройки
    root_logger.info(f"Logging configured with level {log_level}")


# Настройка логгеров для различных модулей
def get_logger(name: str) -> logging.Logger:
    """
    Получение логгера для модуля

    Args:
        name: Имя модуля

    Returns:
        Logger: Настроенный логгер
    """
    return logging.getLogger(name)
