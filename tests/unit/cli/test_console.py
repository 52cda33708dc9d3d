"""
Тесты для консольного ввода-вывода
"""
import pytest

pytestmark = pytest.mark.unit


def test_prompt_reads_line(make_console):
    console = make_console(["  alice  "])

    assert console.prompt("Логин: ") == "  alice  "
    assert console.stdout.getvalue() == "Логин: "


def test_prompt_eof(make_console):
    console = make_console([])

    with pytest.raises(EOFError):
        console.prompt("Логин: ")


def test_show_rows(make_console):
    console = make_console([])

    count = console.show_rows(["login", "status"], [("bob", "Занят"), ("carol", None)])

    assert count == 2
    assert console.stdout.getvalue().splitlines() == ["login\tstatus", "bob\tЗанят", "carol\t"]


def test_show_no_rows(make_console):
    console = make_console([])

    assert console.show_rows(["login"], []) == 0
    assert console.stdout.getvalue().strip() == "(нет записей)"
