"""
Тесты для сервиса пользователей: регистрация, вход, списки и удаление аккаунта
"""
import pytest
from sqlalchemy import func, select

from messenger.core.exceptions import (
    ConstraintViolationError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from messenger.db.models import Chat, Message, UserList, chat_members, notifications, user_list_members
from messenger.db.repositories.user import UserRepository
from messenger.schemas.message import MessageCreate
from messenger.schemas.user import UserCreate


pytestmark = pytest.mark.unit

TEST_PASSWORD = "password123"


async def _count(db_session, stmt) -> int:
    result = await db_session.execute(stmt)
    return result.scalar_one()


@pytest.mark.asyncio
async def test_create_user_creates_empty_lists(db_session, user_service, alice):
    """Новый пользователь получает два пустых списка: контакты и заблокированные"""
    repo = UserRepository(db_session)
    user = await repo.get_by_login(alice)

    assert user is not None
    assert user.contact_list_id != user.block_list_id
    assert await repo.count_list_members(user.contact_list_id) == 0
    assert await repo.count_list_members(user.block_list_id) == 0
    assert await _count(db_session, select(func.count()).select_from(UserList)) == 2
    # Пароль хранится только в виде хеша
    assert user.password_hash != TEST_PASSWORD


@pytest.mark.asyncio
async def test_create_user_duplicate_login(user_service, alice):
    """Повторная регистрация логина отклоняется"""
    with pytest.raises(ConstraintViolationError):
        await user_service.create_user(
            UserCreate(login=alice, password="other", phone="+7000", status="")
        )


@pytest.mark.asyncio
async def test_authenticate_user(user_service, alice):
    """Вход с верным паролем возвращает сессию пользователя"""
    session = await user_service.authenticate_user(alice, TEST_PASSWORD)

    assert session.login == alice
    assert session.chat_id is None


@pytest.mark.asyncio
@pytest.mark.parametrize("login,password", [
    ("alice", "wrong-password"),
    ("nobody", TEST_PASSWORD),
])
async def test_authenticate_user_failure(user_service, alice, login, password):
    """Неверный пароль и неизвестный логин дают одинаковую ошибку"""
    with pytest.raises(UnauthorizedError) as exc_info:
        await user_service.authenticate_user(login, password)

    assert str(exc_info.value) == "Неверный логин или пароль"


@pytest.mark.asyncio
async def test_add_contact_and_list(user_service, alice, bob, carol):
    """Контакты возвращаются вместе со статусами"""
    await user_service.add_contact(alice, bob)
    await user_service.add_contact(alice, carol)

    contacts = await user_service.list_contacts(alice)

    assert [(c.login, c.status) for c in contacts] == [("bob", "Занят"), ("carol", "")]
    assert await user_service.list_contacts(bob) == []


@pytest.mark.asyncio
async def test_add_contact_twice(user_service, alice, bob):
    """Повторное добавление в контакты отклоняется"""
    await user_service.add_contact(alice, bob)

    with pytest.raises(ConstraintViolationError):
        await user_service.add_contact(alice, bob)

    assert len(await user_service.list_contacts(alice)) == 1


@pytest.mark.asyncio
async def test_add_unknown_user_to_lists(db_session, user_service, alice):
    """Несуществующего пользователя нельзя добавить ни в один список"""
    with pytest.raises(NotFoundError):
        await user_service.add_contact(alice, "ghost")
    with pytest.raises(NotFoundError):
        await user_service.add_block(alice, "ghost")

    assert await _count(db_session, select(func.count()).select_from(user_list_members)) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("target", ["alice", "  ", ""])
async def test_add_self_or_empty_to_list(user_service, alice, target):
    """Себя и пустой логин добавить в список нельзя"""
    with pytest.raises(InvalidInputError):
        await user_service.add_contact(alice, target)


@pytest.mark.asyncio
async def test_block_list_independent_from_contacts(user_service, alice, bob, carol):
    """Списки контактов и заблокированных не пересекаются"""
    await user_service.add_contact(alice, bob)
    await user_service.add_block(alice, carol)

    assert await user_service.list_blocked(alice) == ["carol"]
    assert [c.login for c in await user_service.list_contacts(alice)] == ["bob"]


@pytest.mark.asyncio
async def test_delete_account(
    db_session, user_service, chat_service, message_service, alice, bob, carol
):
    """
    Удаление аккаунта убирает сообщения, уведомления, списки и участие в чатах

    Чат, в котором никого не осталось, удаляется; чат с другими участниками
    остается без инициатора.
    """
    await user_service.add_contact(bob, alice)
    await user_service.add_contact(alice, bob)

    shared_chat = await chat_service.start_chat(alice)
    await chat_service.add_member(shared_chat, bob, alice)
    await message_service.create_message(shared_chat, alice, MessageCreate(text="привет"))
    await message_service.create_message(shared_chat, bob, MessageCreate(text="и тебе"))
    lonely_chat = await chat_service.start_chat(alice)

    await user_service.delete_account(alice)

    assert await UserRepository(db_session).get_by_login(alice) is None
    assert await _count(db_session, select(func.count()).select_from(UserList)) == 4
    assert await user_service.list_contacts(bob) == []

    assert await chat_service.list_members(shared_chat) == ["bob"]
    chat = await chat_service.chat_repo.get_by_id(shared_chat)
    assert chat.initiator_login is None
    assert await chat_service.chat_repo.get_by_id(lonely_chat) is None

    senders = await db_session.execute(select(Message.sender_login))
    assert senders.scalars().all() == ["bob"]
    owners = await db_session.execute(select(notifications.c.owner_login))
    assert alice not in owners.scalars().all()
    assert await _count(
        db_session, select(func.count()).select_from(chat_members).where(chat_members.c.member_login == alice)
    ) == 0

    # Логин снова свободен
    await user_service.create_user(UserCreate(login=alice, password="new", phone="+7", status=""))


@pytest.mark.asyncio
async def test_delete_unknown_account(user_service):
    with pytest.raises(NotFoundError):
        await user_service.delete_account("ghost")


@pytest.mark.asyncio
async def test_delete_account_keeps_chats_table_consistent(db_session, user_service, chat_service, alice):
    """Пустой чат без сообщений удаляется вместе с аккаунтом инициатора"""
    await chat_service.start_chat(alice)

    await user_service.delete_account(alice)

    assert await _count(db_session, select(func.count()).select_from(Chat)) == 0
