"""
Контроллер консольной сессии

Читает выбор пункта меню, вызывает ровно одну операцию сервисов
и переводит автомат в следующее состояние.
"""
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, List, Optional, Union

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from messenger.cli.console import Console
from messenger.cli.state_machine import (
    MENU_TITLES,
    MENUS,
    Action,
    SessionState,
    next_state,
    resolve_action,
)
from messenger.core.config import settings
from messenger.core.exceptions import InvalidInputError, MessengerError, NotFoundError
from messenger.core.logging import get_logger
from messenger.schemas.chat import ChatCreate
from messenger.schemas.message import AttachmentCreate, MessageCreate
from messenger.schemas.user import UserCreate
from messenger.services.chat_service import ChatService
from messenger.services.message_service import MessageService
from messenger.services.notification_service import NotificationService
from messenger.services.user_service import UserService

# Получение логгера
logger = get_logger("session_controller")

# Обработчик возвращает False при отмене или действие, по которому выполняется переход
Handler = Callable[[], Awaitable[Union[bool, Action, None]]]

# Верхняя граница идентификаторов: столбцы Integer в хранилище 32-битные
MAX_ID = 2 ** 31 - 1


def _validation_message(error: ValidationError) -> str:
    """Первое сообщение об ошибке валидации в читаемом виде"""
    details = error.errors()
    if not details:
        return "Некорректные данные"
    message = details[0].get("msg", "Некорректные данные")
    return message.removeprefix("Value error, ")


class SessionController:
    """Сессия одного пользователя консоли поверх общего хранилища"""

    def __init__(self, db: AsyncSession, console: Console):
        self.console = console
        self.user_service = UserService(db)
        self.chat_service = ChatService(db)
        self.message_service = MessageService(db)
        self.notification_service = NotificationService(db)

        self.state = SessionState.ANONYMOUS
        self.login: Optional[str] = None
        self.chat_id: Optional[int] = None

        self._handlers: Dict[Action, Handler] = {
            Action.CREATE_USER: self._create_user,
            Action.LOG_IN: self._log_in,
            Action.EXIT: self._noop,
            Action.ADD_CONTACT: self._add_contact,
            Action.LIST_CONTACTS: self._list_contacts,
            Action.READ_NOTIFICATIONS: self._read_notifications,
            Action.LIST_BLOCKED: self._list_blocked,
            Action.DELETE_ACCOUNT: self._delete_account,
            Action.ADD_BLOCK: self._add_block,
            Action.LIST_CHATS: self._list_chats,
            Action.OPEN_CHAT: self._open_chat,
            Action.START_CHAT: self._start_chat,
            Action.LOG_OUT: self._noop,
            Action.LIST_MEMBERS: self._list_members,
            Action.ADD_MEMBER: self._add_member,
            Action.REMOVE_MEMBER: self._remove_member,
            Action.DELETE_CHAT: self._delete_chat,
            Action.VIEW_MESSAGES: self._view_messages,
            Action.CREATE_MESSAGE: self._create_message,
            Action.DELETE_MESSAGE: self._delete_message,
            Action.EDIT_MESSAGE: self._edit_message,
            Action.ATTACH_MEDIA: self._attach_media,
            Action.EXIT_CHAT: self._noop,
        }

    async def run(self) -> None:
        """Главный цикл: от главного меню до выхода"""
        self._transition(Action.START, True)
        while self.state != SessionState.EXIT:
            await self.step()
        logger.info("Сессия завершена")

    async def step(self) -> None:
        """Одна итерация: меню, выбор, операция, переход"""
        self._render_menu()
        try:
            choice = self._read_choice()
        except EOFError:
            logger.info("Ввод завершен, выход из сессии")
            self.state = SessionState.EXIT
            return

        action = resolve_action(self.state, choice)
        if action is None:
            self.console.error("Неизвестный пункт меню!")
            return
        await self.dispatch(action)

    async def dispatch(self, action: Action) -> bool:
        """
        Выполнение действия и переход автомата

        Ошибки операций выводятся пользователю, состояние при этом
        не меняется. Действия меню чата выполняются только пока
        пользователь остается участником открытого чата.

        Returns:
            True, если действие выполнено
        """
        if self.state == SessionState.CHAT_SELECTED and action != Action.EXIT_CHAT:
            if not await self._still_in_chat():
                return False

        handler = self._handlers[action]
        transition_action = action
        try:
            outcome = await handler()
            succeeded = outcome is not False
            if isinstance(outcome, Action):
                transition_action = outcome
        except MessengerError as e:
            logger.info(f"Операция {action.value} отклонена: {e}")
            self.console.error(str(e))
            succeeded = False
        except ValidationError as e:
            error = InvalidInputError(_validation_message(e))
            logger.info(f"Операция {action.value} отклонена: {error}")
            self.console.error(str(error))
            succeeded = False
        except EOFError:
            self.state = SessionState.EXIT
            return False

        self._transition(transition_action, succeeded)
        return succeeded

    async def _still_in_chat(self) -> bool:
        """Проверка участия в открытом чате; при потере доступа возврат в меню пользователя"""
        try:
            await self.chat_service.open_chat(self.login, self.chat_id)
        except NotFoundError as e:
            logger.info(f"Пользователь {self.login} больше не участник чата {self.chat_id}")
            self.console.error(str(e))
            self._transition(Action.EXIT_CHAT, True)
            return False
        return True

    def _transition(self, action: Action, succeeded: bool) -> None:
        previous = self.state
        self.state = next_state(self.state, action, succeeded)
        if self.state != previous:
            logger.debug(f"Переход {previous.value} -> {self.state.value} по действию {action.value}")
        if self.state in (SessionState.MAIN_MENU, SessionState.EXIT):
            self.login = None
            self.chat_id = None
        elif self.state == SessionState.AUTHENTICATED:
            self.chat_id = None

    def _render_menu(self) -> None:
        title = MENU_TITLES[self.state]
        self.console.write(title)
        self.console.write("-" * len(title))
        for item in MENUS[self.state]:
            self.console.write(f"{item.choice}. {item.label}")

    def _read_choice(self) -> int:
        """Чтение номера пункта меню, повтор до корректного ввода"""
        while True:
            raw = self.console.prompt("Сделайте выбор: ")
            try:
                return int(raw.strip())
            except ValueError:
                self.console.error("Некорректный ввод!")

    def _read_int(self, text: str) -> int:
        raw = self.console.prompt(text).strip()
        try:
            value = int(raw)
        except ValueError:
            raise InvalidInputError(f"Ожидалось число, получено: '{raw}'")
        if not 1 <= value <= MAX_ID:
            raise InvalidInputError(f"Идентификатор должен быть от 1 до {MAX_ID}")
        return value

    def _read_logins(self, text: str) -> List[str]:
        logins = []
        while True:
            value = self.console.prompt(text).strip()
            if value == "quit":
                return logins
            if value:
                logins.append(value)

    async def _noop(self) -> None:
        return None

    # Главное меню

    async def _create_user(self) -> None:
        user_in = UserCreate(
            login=self.console.prompt("\tЛогин: "),
            password=self.console.prompt("\tПароль: "),
            phone=self.console.prompt("\tТелефон: "),
            status=self.console.prompt("\tСтатус: "),
        )
        await self.user_service.create_user(user_in)
        self.console.write("Пользователь успешно создан!")

    async def _log_in(self) -> None:
        login = self.console.prompt("\tЛогин: ").strip()
        password = self.console.prompt("\tПароль: ")
        session = await self.user_service.authenticate_user(login, password)
        self.login = session.login
        self.console.write(f"Добро пожаловать, {session.login}!")

    # Меню пользователя

    async def _add_contact(self) -> None:
        target = self.console.prompt("\tЛогин контакта: ")
        await self.user_service.add_contact(self.login, target)
        self.console.write("Пользователь добавлен в контакты!")

    async def _list_contacts(self) -> None:
        contacts = await self.user_service.list_contacts(self.login)
        self.console.show_rows(["login", "status"], [(c.login, c.status) for c in contacts])

    async def _read_notifications(self) -> None:
        message_ids = await self.notification_service.read_notifications(self.login)
        self.console.show_rows(["msg_id"], [(message_id,) for message_id in message_ids])

    async def _list_blocked(self) -> None:
        blocked = await self.user_service.list_blocked(self.login)
        self.console.show_rows(["login"], [(login,) for login in blocked])

    async def _delete_account(self) -> Optional[bool]:
        answer = self.console.prompt("Удалить аккаунт без возможности восстановления? (yes/no): ")
        if answer.strip().lower() != "yes":
            self.console.write("Аккаунт не удален")
            return False
        await self.user_service.delete_account(self.login)
        self.console.write("Аккаунт удален")
        return True

    async def _add_block(self) -> None:
        target = self.console.prompt("\tЛогин для блокировки: ")
        await self.user_service.add_block(self.login, target)
        self.console.write("Пользователь заблокирован!")

    async def _list_chats(self) -> None:
        chats = await self.chat_service.list_user_chats(self.login)
        self.console.show_rows(["chat_id", "last_activity"], [(c.chat_id, c.last_activity) for c in chats])

    async def _open_chat(self) -> None:
        chat_id = self._read_int("Введите ID чата: ")
        self.chat_id = await self.chat_service.open_chat(self.login, chat_id)

    async def _start_chat(self) -> None:
        members = self._read_logins("Логин участника (quit - закончить): ")
        chat_id = await self.chat_service.start_chat(self.login, ChatCreate(members=members))
        self.console.write(f"Создан чат {chat_id}")

        text = self.console.prompt("Первое сообщение (пусто - пропустить): ")
        if text.strip():
            await self.message_service.create_message(chat_id, self.login, MessageCreate(text=text))

    # Меню чата

    async def _list_members(self) -> None:
        members = await self.chat_service.list_members(self.chat_id)
        self.console.show_rows(["member"], [(login,) for login in members])

    async def _add_member(self) -> None:
        login = self.console.prompt("Логин нового участника: ")
        await self.chat_service.add_member(self.chat_id, login, self.login)
        self.console.write("Участник добавлен")

    async def _remove_member(self) -> Optional[Action]:
        login = self.console.prompt("Логин удаляемого участника: ").strip()
        await self.chat_service.remove_member(self.chat_id, login)
        self.console.write("Участник удален")
        if login == self.login:
            # Вышедший из чата теряет к нему доступ
            return Action.EXIT_CHAT
        return None

    async def _delete_chat(self) -> Optional[bool]:
        answer = self.console.prompt("Удалить чат целиком? (yes/no): ")
        if answer.strip().lower() != "yes":
            self.console.write("Чат не удален")
            return False
        await self.chat_service.delete_chat(self.chat_id)
        self.console.write("Чат удален")
        return True

    async def _view_messages(self) -> None:
        page_size = settings.MESSAGES_PAGE_SIZE
        offset = 0
        headers = ["msg_id", "sender", "timestamp", "text", "media_type", "url"]
        while True:
            rows = await self.message_service.view_messages(self.chat_id, offset=offset, limit=page_size)
            self.console.show_rows(headers, [
                (r.message_id, r.sender_login, r.created_at, r.text, r.media_type, r.url) for r in rows
            ])
            while True:
                answer = self.console.prompt(
                    f"Введите more для следующих {page_size} сообщений или quit для выхода: "
                ).strip()
                if answer == "quit":
                    return
                if answer == "more":
                    offset += page_size
                    break
                self.console.error("Некорректный ввод, попробуйте еще раз")

    async def _create_message(self) -> None:
        text = self.console.prompt("Текст сообщения: ")
        raw_ttl = self.console.prompt("Самоуничтожение через N секунд (пусто - нет): ").strip()
        expires_at = None
        if raw_ttl:
            try:
                seconds = int(raw_ttl)
            except ValueError:
                raise InvalidInputError(f"Ожидалось число секунд, получено: '{raw_ttl}'")
            if seconds <= 0:
                raise InvalidInputError("Время самоуничтожения должно быть положительным")
            expires_at = datetime.utcnow() + timedelta(seconds=seconds)

        attachments = []
        while True:
            media_type = self.console.prompt("Тип вложения (пусто - без вложений): ").strip()
            if not media_type:
                break
            url = self.console.prompt("URL вложения: ")
            attachments.append(AttachmentCreate(media_type=media_type, url=url))

        message_in = MessageCreate(text=text, expires_at=expires_at, attachments=attachments)
        message_id = await self.message_service.create_message(self.chat_id, self.login, message_in)
        self.console.write(f"Сообщение {message_id} отправлено")

    async def _delete_message(self) -> None:
        message_id = self._read_int("Введите ID сообщения: ")
        await self.message_service.delete_message(message_id, chat_id=self.chat_id)
        self.console.write("Сообщение удалено")

    async def _edit_message(self) -> None:
        message_id = self._read_int("Введите ID сообщения: ")
        text = self.console.prompt("Новый текст: ")
        await self.message_service.edit_message(message_id, self.login, text, chat_id=self.chat_id)
        self.console.write("Сообщение изменено")

    async def _attach_media(self) -> None:
        message_id = self._read_int("Введите ID сообщения: ")
        attachment = AttachmentCreate(
            media_type=self.console.prompt("Тип вложения: "),
            url=self.console.prompt("URL вложения: "),
        )
        await self.message_service.attach_media(message_id, attachment, chat_id=self.chat_id)
        self.console.write("Вложение добавлено")
