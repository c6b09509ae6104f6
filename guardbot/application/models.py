"""Типы данных модерации."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import FrozenSet, Optional, Union


FLOOD_WINDOW_MIN = 3
FLOOD_WINDOW_MAX = 60
FLOOD_WINDOW_DEFAULT = 10
FLOOD_LIMIT_MIN = 2
FLOOD_LIMIT_MAX = 20
FLOOD_LIMIT_DEFAULT = 6
FLOOD_MUTE = timedelta(seconds=60)

WARN_LIMIT = 3
WARN_CEILING = 99

DEFAULT_MUTE = timedelta(minutes=10)
# дольше 366 дней Telegram считает ограничение бессрочным
MAX_MUTE = timedelta(days=366)
PURGE_LIMIT = 100


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


@dataclass(frozen=True, order=True)
class Identifier:
    """Канонический идентификатор чата или пользователя.

    Числовая и строковая формы одного id равны: ``Identifier.parse("42")``
    == ``Identifier.parse(42)``.
    """

    value: int

    @classmethod
    def parse(cls, raw: Union[int, str, "Identifier"]) -> "Identifier":
        """Привести id к канонической форме.

        Raises:
            ValueError: если значение не является целым числом
        """
        if isinstance(raw, Identifier):
            return raw
        if isinstance(raw, bool):
            raise ValueError(f"Некорректный идентификатор: {raw!r}")
        if isinstance(raw, int):
            return cls(raw)
        text = str(raw).strip()
        if not text.lstrip("-").isdigit():
            raise ValueError(f"Некорректный идентификатор: {raw!r}")
        return cls(int(text))

    def __str__(self) -> str:
        return str(self.value)


class ChatType(str, Enum):
    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"
    CHANNEL = "channel"


class Role(str, Enum):
    MEMBER = "member"
    ADMIN = "admin"
    OWNER = "owner"


class MediaKind(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"
    AUDIO = "audio"
    VOICE = "voice"
    ANIMATION = "animation"
    STICKER = "sticker"


class ToggleKey(str, Enum):
    """Переключатели чата. Значение является префиксом ключа в хранилище."""

    WELCOME = "welcome_enabled"
    ANTILINK = "antilink"
    LOCKMEDIA = "lockmedia"
    AUTODELCMD = "autodelcmd"
    ANTIFLOOD = "antiflood"

    @property
    def default(self) -> bool:
        return _TOGGLE_DEFAULTS[self]

    @property
    def label(self) -> str:
        return _TOGGLE_TITLES[self]


_TOGGLE_DEFAULTS = {
    ToggleKey.WELCOME: False,
    ToggleKey.ANTILINK: False,
    ToggleKey.LOCKMEDIA: False,
    ToggleKey.AUTODELCMD: True,
    ToggleKey.ANTIFLOOD: True,
}

_TOGGLE_TITLES = {
    ToggleKey.WELCOME: "Приветствие",
    ToggleKey.ANTILINK: "AntiLink",
    ToggleKey.LOCKMEDIA: "LockMedia",
    ToggleKey.AUTODELCMD: "AutoDelCmd",
    ToggleKey.ANTIFLOOD: "AntiFlood",
}


class SettingsPage(str, Enum):
    MAIN = "main"
    PANEL = "panel"
    RULES = "rules"


@dataclass(frozen=True)
class ChatConfig:
    """Настройки одного чата со значениями по умолчанию."""

    welcome_enabled: bool = ToggleKey.WELCOME.default
    antilink_enabled: bool = ToggleKey.ANTILINK.default
    lockmedia_enabled: bool = ToggleKey.LOCKMEDIA.default
    autodelete_commands_enabled: bool = ToggleKey.AUTODELCMD.default
    antiflood_enabled: bool = ToggleKey.ANTIFLOOD.default
    flood_window_seconds: int = FLOOD_WINDOW_DEFAULT
    flood_limit: int = FLOOD_LIMIT_DEFAULT
    rules_text: Optional[str] = None
    welcome_template: Optional[str] = None

    def is_enabled(self, toggle: ToggleKey) -> bool:
        return {
            ToggleKey.WELCOME: self.welcome_enabled,
            ToggleKey.ANTILINK: self.antilink_enabled,
            ToggleKey.LOCKMEDIA: self.lockmedia_enabled,
            ToggleKey.AUTODELCMD: self.autodelete_commands_enabled,
            ToggleKey.ANTIFLOOD: self.antiflood_enabled,
        }[toggle]


@dataclass(frozen=True)
class ActionResult:
    """Итог запроса к актуатору: успех или отказ с причиной."""

    action: str
    ok: bool
    reason: Optional[str] = None

    @classmethod
    def success(cls, action: str) -> "ActionResult":
        return cls(action=action, ok=True)

    @classmethod
    def failure(cls, action: str, reason: str) -> "ActionResult":
        return cls(action=action, ok=False, reason=reason)


@dataclass(frozen=True)
class IncomingMessage:
    """Входящее сообщение в виде, не зависящем от платформы."""

    chat_id: Identifier
    chat_type: ChatType
    message_id: int
    sender_id: Optional[Identifier]
    text: str = ""
    media: FrozenSet[MediaKind] = field(default_factory=frozenset)
    sender_is_bot: bool = False

    @property
    def is_command(self) -> bool:
        return self.text.startswith("/")


@dataclass(frozen=True)
class CommandContext:
    """Всё, что нужно обработчику команды."""

    chat_id: Identifier
    chat_type: ChatType
    message_id: int
    requester_id: Identifier
    args: tuple = ()
    chat_title: str = ""
    reply_to_user_id: Optional[Identifier] = None
    reply_to_message_id: Optional[int] = None
    reply_to_text: Optional[str] = None
