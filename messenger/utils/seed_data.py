import random
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from messenger.core.logging import get_logger
from messenger.db.database import Database
from messenger.schemas.chat import ChatCreate
from messenger.schemas.message import AttachmentCreate, MessageCreate
from messenger.schemas.user import UserCreate
from messenger.services.chat_service import ChatService
from messenger.services.message_service import MessageService
from messenger.services.user_service import UserService

# Получение логгера
logger = get_logger("seed_data")

# Тестовые данные
TEST_USERS = [
    {"login": "alice", "password": "password123", "phone": "+10000000001", "status": "На связи"},
    {"login": "bob", "password": "password123", "phone": "+10000000002", "status": "Занят"},
    {"login": "carol", "password": "password123", "phone": "+10000000003", "status": ""},
    {"login": "dave", "password": "password123", "phone": "+10000000004", "status": "В отпуске"},
]

TEST_MESSAGES = [
    "Привет! Как дела?",
    "Что нового?",
    "Встретимся сегодня?",
    "Спасибо за информацию!",
    "Посмотри, что я нашел!",
    "Когда у нас дедлайн?",
    "Можешь помочь с задачей?",
    "Отличная работа!",
    "Завтра созвон в 10:00",
    "Не забудь прислать отчет",
    "Хорошего дня!",
]


async def seed_users(db: AsyncSession) -> list:
    """Создание тестовых пользователей и их контактов"""
    print("Создание пользователей...")
    user_service = UserService(db)
    logins = []
    for user_data in TEST_USERS:
        logins.append(await user_service.create_user(UserCreate(**user_data)))

    # Каждый знает каждого
    for owner in logins:
        for contact in logins:
            if owner != contact:
                await user_service.add_contact(owner, contact)
    return logins


async def seed_chats(db: AsyncSession, logins: list) -> list:
    """Создание личного и группового чатов"""
    print("Создание чатов...")
    chat_service = ChatService(db)
    private_chat = await chat_service.start_chat(logins[0], ChatCreate(members=[logins[1]]))
    group_chat = await chat_service.start_chat(logins[0], ChatCreate(members=logins[1:]))
    return [private_chat, group_chat]


async def seed_messages(db: AsyncSession, chat_ids: list) -> int:
    """Создание тестовых сообщений"""
    print("Создание сообщений...")
    chat_service = ChatService(db)
    message_service = MessageService(db, notify_members=False)
    count = 0

    now = datetime.utcnow()
    for chat_id in chat_ids:
        members = await chat_service.list_members(chat_id)
        # От 5 до 15 сообщений за последние 5 дней, по порядку
        offsets = sorted(random.sample(range(1, 60 * 24 * 5), random.randint(5, 15)), reverse=True)
        for minutes in offsets:
            message_in = MessageCreate(text=random.choice(TEST_MESSAGES))
            await message_service.create_message(
                chat_id, random.choice(members), message_in, now=now - timedelta(minutes=minutes)
            )
            count += 1

    # Сообщение с вложением и самоуничтожением через сутки
    message_in = MessageCreate(
        text="Фото с выходных, удалится завтра",
        expires_at=now + timedelta(days=1),
        attachments=[AttachmentCreate(media_type="photo", url="https://example.com/weekend.jpg")],
    )
    await message_service.create_message(chat_ids[0], TEST_USERS[1]["login"], message_in, now=now)
    return count + 1


async def seed_all(database: Database) -> None:
    """Заполнение пустой базы данных тестовыми данными"""
    await database.init_db()
    async with database.session() as db:
        logins = await seed_users(db)
        chat_ids = await seed_chats(db, logins)
        messages = await seed_messages(db, chat_ids)

    logger.info(f"Тестовые данные созданы: {len(logins)} пользователей, {len(chat_ids)} чатов, {messages} сообщений")

    print(f"Создано {len(logins)} пользователей")
    print(f"Создано {len(chat_ids)} чатов")
    print(f"Создано {messages} сообщений")

    print("\nТестовые учетные данные:")
    for user_data in TEST_USERS:
        print(f"Логин: {user_data['login']}, Пароль: {user_data['password']}")
