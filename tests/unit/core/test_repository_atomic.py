"""
Тесты для транзакций репозиториев
"""
import pytest
from sqlalchemy import func, select

from messenger.core.exceptions import ConstraintViolationError
from messenger.db.models import ListType, UserList
from messenger.db.repositories.user import UserRepository

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_atomic_maps_integrity_error(db_session, alice, bob):
    """Нарушение уникальности откатывает всю транзакцию"""
    repo = UserRepository(db_session)
    user = await repo.get_by_login(alice)

    with pytest.raises(ConstraintViolationError):
        async with repo.atomic("двойное добавление"):
            await repo.add_list_member(user.contact_list_id, bob)
            await repo.add_list_member(user.contact_list_id, bob)

    user = await repo.get_by_login(alice)
    assert await repo.count_list_members(user.contact_list_id) == 0


@pytest.mark.asyncio
async def test_atomic_rolls_back_on_error(db_session, alice):
    repo = UserRepository(db_session)

    with pytest.raises(RuntimeError):
        async with repo.atomic("создание списка"):
            await repo.create_list(ListType.CONTACT)
            raise RuntimeError("сбой")

    result = await db_session.execute(select(func.count()).select_from(UserList))
    assert result.scalar_one() == 2
