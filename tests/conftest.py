from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

import pytest

from guardbot.application.admin_gate import AdminGate
from guardbot.application.chat_settings import ChatSettingsService
from guardbot.application.commands import ModerationCommands
from guardbot.application.errors import ActuatorError, AdminLookupError
from guardbot.application.flood_guard import FloodGuard
from guardbot.application.models import (
    ChatType,
    CommandContext,
    Identifier,
    IncomingMessage,
)
from guardbot.application.pipeline import ModerationPipeline
from guardbot.application.warn_ledger import WarnLedger
from guardbot.infrastructure.config import InMemoryConfigStore, InMemoryFloodState

CHAT = Identifier(-100123)
OWNER = Identifier(1)
ADMIN = Identifier(10)
MEMBER = Identifier(20)
TARGET = Identifier(30)

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class RecordingActuator:
    """Записывает вызовы; действия из ``fail`` отклоняются."""

    def __init__(self) -> None:
        self.calls = []
        self.fail = set()

    async def _record(self, name: str, *args) -> None:
        self.calls.append((name,) + args)
        if name in self.fail:
            raise ActuatorError(f"{name}: not enough rights")

    def names(self):
        return [call[0] for call in self.calls]

    async def delete_message(self, chat_id, message_id):
        await self._record("delete_message", chat_id, message_id)

    async def delete_messages(self, chat_id, message_ids):
        await self._record("delete_messages", chat_id, list(message_ids))

    async def mute(self, chat_id, user_id, duration):
        await self._record("mute", chat_id, user_id, duration)

    async def unmute(self, chat_id, user_id):
        await self._record("unmute", chat_id, user_id)

    async def ban(self, chat_id, user_id):
        await self._record("ban", chat_id, user_id)

    async def kick(self, chat_id, user_id):
        await self._record("kick", chat_id, user_id)

    async def leave_chat(self, chat_id):
        await self._record("leave_chat", chat_id)


class StaticAdminLookup:
    def __init__(self, statuses: Optional[Dict[Identifier, str]] = None) -> None:
        self.statuses = statuses or {}
        self.broken = False
        self.calls = 0

    async def get_member_status(self, chat_id, user_id) -> str:
        self.calls += 1
        if self.broken:
            raise AdminLookupError("Bad Request: chat not found")
        return self.statuses.get(user_id, "member")


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_message(
    text: str = "hello",
    media=frozenset(),
    sender: Optional[Identifier] = MEMBER,
    chat_type: ChatType = ChatType.SUPERGROUP,
    message_id: int = 100,
    sender_is_bot: bool = False,
) -> IncomingMessage:
    return IncomingMessage(
        chat_id=CHAT,
        chat_type=chat_type,
        message_id=message_id,
        sender_id=sender,
        text=text,
        media=frozenset(media),
        sender_is_bot=sender_is_bot,
    )


def make_context(
    *args: str,
    requester: Identifier = ADMIN,
    chat_type: ChatType = ChatType.SUPERGROUP,
    message_id: int = 100,
    reply_to_user: Optional[Identifier] = None,
    reply_to_message: Optional[int] = None,
    reply_text: Optional[str] = None,
) -> CommandContext:
    return CommandContext(
        chat_id=CHAT,
        chat_type=chat_type,
        message_id=message_id,
        requester_id=requester,
        args=tuple(args),
        chat_title="Test chat",
        reply_to_user_id=reply_to_user,
        reply_to_message_id=reply_to_message,
        reply_to_text=reply_text,
    )


@pytest.fixture()
def store():
    return InMemoryConfigStore()


@pytest.fixture()
def settings(store):
    return ChatSettingsService(store)


@pytest.fixture()
def actuator():
    return RecordingActuator()


@pytest.fixture()
def lookup():
    return StaticAdminLookup({ADMIN: "administrator", OWNER: "creator"})


@pytest.fixture()
def gate(lookup):
    return AdminGate(lookup, OWNER)


@pytest.fixture()
def ledger(store):
    return WarnLedger(store)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def flood_guard(clock):
    return FloodGuard(InMemoryFloodState(), clock)


@pytest.fixture()
def pipeline(settings, flood_guard, actuator):
    return ModerationPipeline(settings, flood_guard, actuator)


@pytest.fixture()
def commands(settings, ledger, actuator, gate):
    return ModerationCommands(settings, ledger, actuator, gate)
