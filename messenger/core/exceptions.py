"""
Исключения предметной области мессенджера

Все ошибки операций наследуются от MessengerError. Контроллер сессии
перехватывает MessengerError, выводит сообщение и остается в текущем
состоянии. StoreConnectionError возникает только при запуске и завершает
процесс.
"""


class MessengerError(Exception):
    """Базовая ошибка мессенджера"""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return self.detail


class StoreConnectionError(MessengerError):
    """Не удалось подключиться к хранилищу"""


class ConstraintViolationError(MessengerError):
    """Нарушение ограничения целостности (дубликат, ссылка на несуществующую запись)"""


class NotFoundError(MessengerError):
    """Пользователь, чат или сообщение не найдены"""


class InvalidInputError(MessengerError):
    """Некорректный ввод: не число, пустое значение, неверный формат"""


class UnauthorizedError(MessengerError):
    """Неверный логин или пароль"""


class AccessDeniedError(MessengerError):
    """Операция запрещена текущему пользователю"""
