"""
Точка входа консольного мессенджера

Запуск: messenger <dbname> <port> <user>
"""
import argparse
import asyncio
import sys
from typing import List, Optional

from messenger.cli.console import Console
from messenger.cli.controller import SessionController
from messenger.core.config import settings
from messenger.core.exceptions import StoreConnectionError
from messenger.core.logging import get_logger, setup_logging
from messenger.db.database import Database

# Получение логгера
logger = get_logger("main")

GREETING = (
    "\n\n*******************************************************\n"
    f"              {settings.PROJECT_NAME}\n"
    "*******************************************************\n"
)


def build_parser() -> argparse.ArgumentParser:
    """Парсер аргументов командной строки"""
    parser = argparse.ArgumentParser(
        prog="messenger",
        usage="messenger <dbname> <port> <user>",
        description=settings.PROJECT_DESCRIPTION,
    )
    parser.add_argument("dbname", help="Имя базы данных")
    parser.add_argument("port", help="Порт сервера базы данных")
    parser.add_argument("user", help="Пользователь базы данных")
    return parser


async def run_session(database: Database, console: Console) -> int:
    """
    Подключение к хранилищу и работа сессии до выхода

    Returns:
        Код завершения процесса
    """
    try:
        await database.check_connection()
        await database.init_db()
        async with database.session() as db:
            controller = SessionController(db, console)
            await controller.run()
        return 0
    except StoreConnectionError as e:
        console.error(f"Ошибка - не удалось подключиться к базе данных: {e}")
        console.write("Убедитесь, что сервер PostgreSQL запущен")
        return 1
    finally:
        console.write("Отключение от базы данных...")
        await database.dispose()
        console.write("Готово\n\nДо свидания!")


def main(argv: Optional[List[str]] = None) -> int:
    """Разбор аргументов, настройка логирования и запуск сессии"""
    args = build_parser().parse_args(argv)

    setup_logging(log_level=settings.LOG_LEVEL)
    console = Console()
    console.write(GREETING)

    database_uri = settings.build_database_uri(args.dbname, args.port, args.user)
    logger.info(f"Запуск сессии, база данных ...@{database_uri.split('@')[-1]}")
    return asyncio.run(run_session(Database(database_uri), console))


if __name__ == "__main__":
    sys.exit(main())
