"""
Конечный автомат консольной сессии

Состояния, пункты меню и таблица переходов не зависят от ввода-вывода,
поэтому проверяются отдельно от контроллера.
"""
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple


class SessionState(str, Enum):
    """Состояния сессии"""
    ANONYMOUS = "anonymous"
    MAIN_MENU = "main_menu"
    AUTHENTICATED = "authenticated"
    CHAT_SELECTED = "chat_selected"
    EXIT = "exit"


class Action(str, Enum):
    """Действия, доступные из меню"""
    START = "start"

    # Главное меню
    CREATE_USER = "create_user"
    LOG_IN = "log_in"
    EXIT = "exit"

    # Меню пользователя
    ADD_CONTACT = "add_contact"
    LIST_CONTACTS = "list_contacts"
    READ_NOTIFICATIONS = "read_notifications"
    LIST_BLOCKED = "list_blocked"
    DELETE_ACCOUNT = "delete_account"
    ADD_BLOCK = "add_block"
    LIST_CHATS = "list_chats"
    OPEN_CHAT = "open_chat"
    START_CHAT = "start_chat"
    LOG_OUT = "log_out"

    # Меню чата
    LIST_MEMBERS = "list_members"
    ADD_MEMBER = "add_member"
    REMOVE_MEMBER = "remove_member"
    DELETE_CHAT = "delete_chat"
    VIEW_MESSAGES = "view_messages"
    CREATE_MESSAGE = "create_message"
    DELETE_MESSAGE = "delete_message"
    EDIT_MESSAGE = "edit_message"
    ATTACH_MEDIA = "attach_media"
    EXIT_CHAT = "exit_chat"


class MenuItem(NamedTuple):
    choice: int
    label: str
    action: Action


MENU_TITLES: Dict[SessionState, str] = {
    SessionState.MAIN_MENU: "ГЛАВНОЕ МЕНЮ",
    SessionState.AUTHENTICATED: "МЕНЮ ПОЛЬЗОВАТЕЛЯ",
    SessionState.CHAT_SELECTED: "МЕНЮ ЧАТА",
}

MENUS: Dict[SessionState, List[MenuItem]] = {
    SessionState.MAIN_MENU: [
        MenuItem(1, "Создать пользователя", Action.CREATE_USER),
        MenuItem(2, "Войти", Action.LOG_IN),
        MenuItem(9, "< ВЫХОД", Action.EXIT),
    ],
    SessionState.AUTHENTICATED: [
        MenuItem(1, "Добавить в контакты", Action.ADD_CONTACT),
        MenuItem(2, "Просмотреть контакты", Action.LIST_CONTACTS),
        MenuItem(3, "Прочитать уведомления", Action.READ_NOTIFICATIONS),
        MenuItem(4, "Просмотреть список заблокированных", Action.LIST_BLOCKED),
        MenuItem(5, "Удалить аккаунт", Action.DELETE_ACCOUNT),
        MenuItem(6, "Заблокировать пользователя", Action.ADD_BLOCK),
        MenuItem(7, "Просмотреть чаты", Action.LIST_CHATS),
        MenuItem(8, "Открыть чат", Action.OPEN_CHAT),
        MenuItem(9, "Начать новый чат", Action.START_CHAT),
        MenuItem(10, "Выйти из аккаунта", Action.LOG_OUT),
    ],
    SessionState.CHAT_SELECTED: [
        MenuItem(1, "Участники чата", Action.LIST_MEMBERS),
        MenuItem(2, "Добавить участника", Action.ADD_MEMBER),
        MenuItem(3, "Удалить участника", Action.REMOVE_MEMBER),
        MenuItem(4, "Удалить чат", Action.DELETE_CHAT),
        MenuItem(5, "Просмотреть сообщения", Action.VIEW_MESSAGES),
        MenuItem(6, "Новое сообщение", Action.CREATE_MESSAGE),
        MenuItem(7, "Удалить сообщение", Action.DELETE_MESSAGE),
        MenuItem(8, "Изменить сообщение", Action.EDIT_MESSAGE),
        MenuItem(9, "Прикрепить вложение", Action.ATTACH_MEDIA),
        MenuItem(10, "Выйти из чата", Action.EXIT_CHAT),
    ],
}

# Переходы при успешном выполнении действия; при ошибке состояние не меняется
TRANSITIONS: Dict[Tuple[SessionState, Action], SessionState] = {
    (SessionState.ANONYMOUS, Action.START): SessionState.MAIN_MENU,
    (SessionState.MAIN_MENU, Action.LOG_IN): SessionState.AUTHENTICATED,
    (SessionState.MAIN_MENU, Action.EXIT): SessionState.EXIT,
    (SessionState.AUTHENTICATED, Action.OPEN_CHAT): SessionState.CHAT_SELECTED,
    (SessionState.AUTHENTICATED, Action.DELETE_ACCOUNT): SessionState.MAIN_MENU,
    (SessionState.AUTHENTICATED, Action.LOG_OUT): SessionState.MAIN_MENU,
    (SessionState.CHAT_SELECTED, Action.DELETE_CHAT): SessionState.AUTHENTICATED,
    (SessionState.CHAT_SELECTED, Action.EXIT_CHAT): SessionState.AUTHENTICATED,
}


def resolve_action(state: SessionState, choice: int) -> Optional[Action]:
    """Действие для номера пункта меню или None, если такого пункта нет"""
    for item in MENUS.get(state, []):
        if item.choice == choice:
            return item.action
    return None


def next_state(state: SessionState, action: Action, succeeded: bool = True) -> SessionState:
    """
    Следующее состояние автомата

    Действия без записи в таблице переходов оставляют сессию
    в текущем состоянии.
    """
    if not succeeded:
        return state
    return TRANSITIONS.get((state, action), state)
