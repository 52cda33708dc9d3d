"""
Консольный ввод-вывод для интерактивной сессии
"""
import sys
from typing import Any, Iterable, Optional, Sequence, TextIO


class Console:
    """
    Ввод строк и вывод результатов

    Потоки задаются явно, поэтому в тестах вместо терминала можно
    передать io.StringIO со сценарием ввода.
    """

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def prompt(self, text: str) -> str:
        """
        Вывод приглашения и чтение строки

        Raises:
            EOFError: Ввод закончился
        """
        self.stdout.write(text)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError("Ввод завершен")
        return line.rstrip("\r\n")

    def write(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def error(self, text: str) -> None:
        print(text, file=self.stderr)

    def show_rows(self, headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> int:
        """
        Вывод строк результата через табуляцию с заголовком

        Returns:
            Количество выведенных строк
        """
        count = 0
        for row in rows:
            if count == 0:
                self.write("\t".join(headers))
            self.write("\t".join("" if value is None else str(value) for value in row))
            count += 1
        if count == 0:
            self.write("(нет записей)")
        return count
