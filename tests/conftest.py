"""
Общие фикстуры для тестов

Этот модуль содержит общие фикстуры, которые могут использоваться во всех тестах проекта.
Фикстуры включают:
- Хранилище в памяти (SQLite через aiosqlite) со всеми таблицами
- Сервисы поверх сессии этого хранилища
- Тестовых пользователей alice, bob и carol
- Консоль со сценарием ввода
"""
import io
import logging
import os

# Логи тестов не пишутся в файлы
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from sqlalchemy.pool import StaticPool

from messenger.cli.console import Console
from messenger.db.database import Database
from messenger.schemas.user import UserCreate
from messenger.services.chat_service import ChatService
from messenger.services.message_service import MessageService
from messenger.services.notification_service import NotificationService
from messenger.services.user_service import UserService

# Настройка логирования для тестов
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("tests")

TEST_PASSWORD = "password123"


@pytest.fixture
async def database():
    """
    Хранилище в памяти со всеми таблицами

    StaticPool держит одно соединение, иначе каждая сессия видела бы
    свою пустую базу.
    """
    db = Database("sqlite+aiosqlite://", echo=False, poolclass=StaticPool)
    await db.init_db()
    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database):
    """Сессия тестового хранилища"""
    async with database.session() as session:
        yield session


@pytest.fixture
def user_service(db_session):
    return UserService(db_session)


@pytest.fixture
def chat_service(db_session):
    return ChatService(db_session)


@pytest.fixture
def message_service(db_session):
    return MessageService(db_session)


@pytest.fixture
def notification_service(db_session):
    return NotificationService(db_session)


async def _create_user(user_service: UserService, login: str, status: str = "") -> str:
    return await user_service.create_user(
        UserCreate(login=login, password=TEST_PASSWORD, phone="+10000000000", status=status)
    )


@pytest.fixture
async def alice(user_service):
    return await _create_user(user_service, "alice", status="На связи")


@pytest.fixture
async def bob(user_service):
    return await _create_user(user_service, "bob", status="Занят")


@pytest.fixture
async def carol(user_service):
    return await _create_user(user_service, "carol")


@pytest.fixture
def make_console():
    """Фабрика консоли: строки ввода подаются списком, вывод собирается в буферы"""
    def _make(lines):
        stdin = io.StringIO("".join(f"{line}\n" for line in lines))
        return Console(stdin=stdin, stdout=io.StringIO(), stderr=io.StringIO())

    return _make
