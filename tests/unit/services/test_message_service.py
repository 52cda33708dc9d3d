"""
Тесты для сервиса сообщений: создание, лента, редактирование и самоуничтожение
"""
from datetime import datetime, timedelta

import pytest

from messenger.core.exceptions import AccessDeniedError, InvalidInputError, NotFoundError
from messenger.schemas.chat import ChatCreate
from messenger.schemas.message import AttachmentCreate, MessageCreate

pytestmark = pytest.mark.unit

NOW = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
async def chat_id(chat_service, alice, bob):
    return await chat_service.start_chat(alice, ChatCreate(members=[bob]))


@pytest.mark.asyncio
async def test_create_and_view_message(message_service, chat_id, alice):
    message_id = await message_service.create_message(chat_id, alice, MessageCreate(text="hi"), now=NOW)

    rows = await message_service.view_messages(chat_id, now=NOW)

    assert len(rows) == 1
    assert rows[0].message_id == message_id
    assert (rows[0].sender_login, rows[0].created_at, rows[0].text) == ("alice", NOW, "hi")
    assert rows[0].media_type is None
    assert rows[0].url is None


@pytest.mark.asyncio
async def test_create_message_access(message_service, chat_id, carol):
    """Писать могут только участники существующего чата"""
    with pytest.raises(AccessDeniedError):
        await message_service.create_message(chat_id, carol, MessageCreate(text="hi"))
    with pytest.raises(NotFoundError):
        await message_service.create_message(999, carol, MessageCreate(text="hi"))


@pytest.mark.asyncio
async def test_create_message_with_past_expiry(message_service, chat_id, alice):
    with pytest.raises(InvalidInputError):
        await message_service.create_message(
            chat_id, alice, MessageCreate(text="hi", expires_at=NOW - timedelta(seconds=1)), now=NOW
        )


@pytest.mark.asyncio
async def test_view_messages_pagination(message_service, chat_id, alice, bob):
    """Страницы по 10 строк, новые сверху, без повторов и пропусков"""
    message_ids = []
    for i in range(25):
        sender = alice if i % 2 else bob
        message_ids.append(await message_service.create_message(
            chat_id, sender, MessageCreate(text=f"сообщение {i}"), now=NOW + timedelta(seconds=i)
        ))

    pages = [await message_service.view_messages(chat_id, offset=offset, limit=10, now=NOW)
             for offset in (0, 10, 20, 30)]

    assert [len(page) for page in pages] == [10, 10, 5, 0]
    seen = [row.message_id for page in pages for row in page]
    assert seen == list(reversed(message_ids))
    assert pages[0][0].text == "сообщение 24"


@pytest.mark.asyncio
async def test_view_messages_invalid_paging(message_service, chat_id):
    with pytest.raises(InvalidInputError):
        await message_service.view_messages(chat_id, offset=-1)
    with pytest.raises(InvalidInputError):
        await message_service.view_messages(chat_id, limit=0)


@pytest.mark.asyncio
async def test_view_messages_with_attachments(message_service, chat_id, alice, bob):
    """Сообщение с двумя вложениями дает две строки, без вложений - одну"""
    with_media = await message_service.create_message(chat_id, alice, MessageCreate(
        text="фото",
        attachments=[
            AttachmentCreate(media_type="Photo", url="https://example.com/a.jpg"),
            AttachmentCreate(media_type="video", url="s3://bucket/b.mp4"),
        ],
    ), now=NOW)
    plain = await message_service.create_message(chat_id, bob, MessageCreate(text="ок"), now=NOW + timedelta(seconds=1))

    rows = await message_service.view_messages(chat_id, now=NOW)

    assert [(r.message_id, r.media_type, r.url) for r in rows] == [
        (plain, None, None),
        (with_media, "photo", "https://example.com/a.jpg"),
        (with_media, "video", "s3://bucket/b.mp4"),
    ]


@pytest.mark.asyncio
async def test_attach_media(message_service, chat_id, alice):
    message_id = await message_service.create_message(chat_id, alice, MessageCreate(text="hi"), now=NOW)

    await message_service.attach_media(
        message_id, AttachmentCreate(media_type="audio", url="http://example.com/a.ogg"), chat_id=chat_id
    )

    attachments = await message_service.message_repo.get_attachments(message_id)
    assert [(a.media_type, a.url) for a in attachments] == [("audio", "http://example.com/a.ogg")]
    with pytest.raises(NotFoundError):
        await message_service.attach_media(
            message_id, AttachmentCreate(media_type="audio", url="http://example.com/a.ogg"), chat_id=chat_id + 1
        )


@pytest.mark.asyncio
async def test_edit_message(message_service, chat_id, alice, bob):
    """Изменить текст может только отправитель"""
    message_id = await message_service.create_message(chat_id, alice, MessageCreate(text="черновик"), now=NOW)

    with pytest.raises(AccessDeniedError):
        await message_service.edit_message(message_id, bob, "чужая правка")
    with pytest.raises(InvalidInputError):
        await message_service.edit_message(message_id, alice, "   ")

    await message_service.edit_message(message_id, alice, "исправлено", chat_id=chat_id)

    rows = await message_service.view_messages(chat_id, now=NOW)
    assert [r.text for r in rows] == ["исправлено"]


@pytest.mark.asyncio
async def test_delete_message(message_service, chat_id, alice):
    message_id = await message_service.create_message(chat_id, alice, MessageCreate(
        text="hi",
        attachments=[AttachmentCreate(media_type="photo", url="https://example.com/a.jpg")],
    ), now=NOW)

    with pytest.raises(NotFoundError):
        await message_service.delete_message(message_id, chat_id=chat_id + 1)
    await message_service.delete_message(message_id, chat_id=chat_id)

    assert await message_service.view_messages(chat_id, now=NOW) == []
    assert await message_service.message_repo.get_attachments(message_id) == []
    with pytest.raises(NotFoundError):
        await message_service.delete_message(message_id)


@pytest.mark.asyncio
async def test_expired_messages_are_swept_before_view(message_service, chat_id, alice):
    """Просроченное сообщение не попадает ни в одну страницу"""
    expiring = await message_service.create_message(
        chat_id, alice, MessageCreate(text="исчезнет", expires_at=NOW + timedelta(minutes=1)), now=NOW
    )
    lasting = await message_service.create_message(
        chat_id, alice, MessageCreate(text="останется", expires_at=NOW + timedelta(hours=1)), now=NOW
    )
    permanent = await message_service.create_message(chat_id, alice, MessageCreate(text="навсегда"), now=NOW)

    before = await message_service.view_messages(chat_id, now=NOW + timedelta(seconds=30))
    after = await message_service.view_messages(chat_id, now=NOW + timedelta(minutes=2))

    assert {r.message_id for r in before} == {expiring, lasting, permanent}
    assert {r.message_id for r in after} == {lasting, permanent}


@pytest.mark.asyncio
async def test_sweep_expired(message_service, chat_id, alice):
    await message_service.create_message(
        chat_id, alice, MessageCreate(text="a", expires_at=NOW + timedelta(seconds=5)), now=NOW
    )

    assert await message_service.sweep_expired(NOW + timedelta(seconds=5)) == 0
    assert await message_service.sweep_expired(NOW + timedelta(seconds=6)) == 1
    assert await message_service.sweep_expired(NOW + timedelta(seconds=7)) == 0


@pytest.mark.asyncio
async def test_create_message_notifies_other_members(message_service, notification_service, chat_id, alice, bob):
    message_id = await message_service.create_message(chat_id, alice, MessageCreate(text="hi"))

    assert await notification_service.list_notifications(bob) == [message_id]
    assert await notification_service.list_notifications(alice) == []
