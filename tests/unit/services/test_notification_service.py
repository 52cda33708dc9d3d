"""
Тесты для очереди уведомлений
"""
import pytest

from messenger.schemas.chat import ChatCreate
from messenger.schemas.message import MessageCreate
from messenger.services.message_service import MessageService

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_read_notifications_drains_queue(
    chat_service, message_service, notification_service, alice, bob
):
    """Повторное чтение возвращает пустой список"""
    chat_id = await chat_service.start_chat(alice, ChatCreate(members=[bob]))
    first = await message_service.create_message(chat_id, bob, MessageCreate(text="1"))
    second = await message_service.create_message(chat_id, bob, MessageCreate(text="2"))

    assert await notification_service.read_notifications(alice) == [first, second]
    assert await notification_service.read_notifications(alice) == []


@pytest.mark.asyncio
async def test_notify(chat_service, message_service, notification_service, alice, bob):
    chat_id = await chat_service.start_chat(alice)
    message_id = await message_service.create_message(chat_id, alice, MessageCreate(text="1"))

    await notification_service.notify(bob, message_id)

    assert await notification_service.list_notifications(bob) == [message_id]
    # Просмотр без чтения очередь не очищает
    assert await notification_service.list_notifications(bob) == [message_id]


@pytest.mark.asyncio
async def test_notifications_disabled(db_session, chat_service, notification_service, alice, bob):
    chat_id = await chat_service.start_chat(alice, ChatCreate(members=[bob]))
    quiet_service = MessageService(db_session, notify_members=False)

    await quiet_service.create_message(chat_id, alice, MessageCreate(text="тихо"))

    assert await notification_service.read_notifications(bob) == []
