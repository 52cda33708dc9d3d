#!/usr/bin/env python
"""
Скрипт для заполнения базы данных тестовыми данными.
Запуск: python seed_db.py <dbname> <port> <user>
"""
import argparse
import asyncio

from messenger.core.config import settings
from messenger.db.database import Database
from messenger.utils.seed_data import seed_all


async def _run(database: Database) -> None:
    try:
        await database.check_connection()
        await seed_all(database)
    finally:
        await database.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Заполнение базы данных тестовыми данными")
    parser.add_argument("dbname")
    parser.add_argument("port")
    parser.add_argument("user")
    args = parser.parse_args()

    print("Заполнение базы данных тестовыми данными...")
    asyncio.run(_run(Database(settings.build_database_uri(args.dbname, args.port, args.user))))
    print("Заполнение базы данных завершено!")
