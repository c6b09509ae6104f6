"""Ошибки application слоя."""

from __future__ import annotations


class GuardbotError(Exception):
    """Базовая ошибка бота."""


class StoreUnavailable(GuardbotError):
    """Хранилище настроек недоступно.

    Фатальна для текущего запроса: значения по умолчанию подставляются
    только при отсутствии ключа, но не при сбое хранилища.
    """


class ConfigurationError(GuardbotError):
    """Некорректный аргумент команды. Состояние не изменяется."""

    def __init__(self, usage: str) -> None:
        super().__init__(usage)
        self.usage = usage


class AuthorizationError(GuardbotError):
    """У пользователя нет нужной роли."""

    def __init__(self, message: str = "Недостаточно прав.") -> None:
        super().__init__(message)
        self.message = message


class ActuatorError(GuardbotError):
    """Платформа отклонила действие (удаление, мут, бан)."""


class AdminLookupError(GuardbotError):
    """Не удалось узнать статус участника в чате."""
