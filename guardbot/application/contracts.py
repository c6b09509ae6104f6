"""Контракты (Protocols) для application слоя."""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional, Protocol

from guardbot.application.models import ActionResult, Identifier


class ConfigStoreContract(Protocol):
    """Асинхронное key/value хранилище настроек и счётчиков.

    Любой метод может выбросить ``StoreUnavailable``.
    """

    async def get_bool(self, key: str, default: bool) -> bool:
        ...

    async def set_bool(self, key: str, value: bool) -> None:
        ...

    async def get_int(self, key: str, default: int) -> int:
        ...

    async def set_int(self, key: str, value: int) -> None:
        ...

    async def get_text(self, key: str) -> Optional[str]:
        ...

    async def set_text(self, key: str, value: str) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def increment(self, key: str, ceiling: int) -> int:
        ...

    async def close(self) -> None:
        ...


class FloodStateContract(Protocol):
    async def hit(self, key: str, now: float, window_seconds: int) -> int:
        ...


class ActuatorContract(Protocol):
    """Исполнитель действий на платформе.

    Методы выбрасывают ``ActuatorError`` при отказе платформы.
    """

    async def delete_message(self, chat_id: Identifier, message_id: int) -> None:
        ...

    async def delete_messages(self, chat_id: Identifier, message_ids: List[int]) -> None:
        ...

    async def mute(self, chat_id: Identifier, user_id: Identifier, duration: timedelta) -> None:
        ...

    async def unmute(self, chat_id: Identifier, user_id: Identifier) -> None:
        ...

    async def ban(self, chat_id: Identifier, user_id: Identifier) -> None:
        ...

    async def kick(self, chat_id: Identifier, user_id: Identifier) -> None:
        ...

    async def leave_chat(self, chat_id: Identifier) -> None:
        ...


class AdminLookupContract(Protocol):
    async def get_member_status(self, chat_id: Identifier, user_id: Identifier) -> str:
        ...


class ModerationPipelineContract(Protocol):
    async def process(self, message):
        ...

    async def after_dispatch(self, message, verdict) -> Optional[ActionResult]:
        ...
