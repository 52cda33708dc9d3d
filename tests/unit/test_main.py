"""
Тесты для точки входа
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from messenger.core.exceptions import StoreConnectionError
from messenger.main import build_parser, main, run_session

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("argv", [[], ["chat"], ["chat", "5432"], ["chat", "5432", "postgres", "extra"]])
def test_wrong_argument_count(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)

    assert exc_info.value.code == 2
    assert "usage: messenger <dbname> <port> <user>" in capsys.readouterr().err


def test_parser_arguments():
    args = build_parser().parse_args(["chat", "5432", "postgres"])

    assert (args.dbname, args.port, args.user) == ("chat", "5432", "postgres")


def test_main_builds_database_uri(capsys):
    with patch("messenger.main.setup_logging"), \
            patch("messenger.main.Database") as database_cls, \
            patch("messenger.main.run_session", new_callable=AsyncMock, return_value=0) as run_session_mock:
        assert main(["chat", "5432", "postgres"]) == 0

    uri = database_cls.call_args.args[0]
    assert uri.endswith("@localhost:5432/chat")
    assert uri.startswith("postgresql+asyncpg://postgres")
    run_session_mock.assert_awaited_once()
    assert "Console Messenger" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_run_session_connection_error(make_console):
    """Недоступное хранилище завершает процесс с кодом 1"""
    database = MagicMock()
    database.check_connection = AsyncMock(side_effect=StoreConnectionError("connection refused"))
    database.dispose = AsyncMock()
    console = make_console([])

    assert await run_session(database, console) == 1

    database.dispose.assert_awaited_once()
    assert "connection refused" in console.stderr.getvalue()
    assert "До свидания!" in console.stdout.getvalue()


@pytest.mark.asyncio
async def test_run_session(database, make_console):
    console = make_console(["9"])

    assert await run_session(database, console) == 0

    output = console.stdout.getvalue()
    assert "ГЛАВНОЕ МЕНЮ" in output
    assert "До свидания!" in output
