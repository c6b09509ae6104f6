from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from aiogram.types import Chat, Message, PhotoSize, User

from conftest import CHAT, MEMBER, TARGET
from guardbot.application.models import ChatType, MediaKind, ToggleKey
from guardbot.presentation.mapping import to_context, to_incoming
from guardbot.presentation.middleware import ModerationMiddleware


def _message(text=None, message_id=100, chat_type="supergroup", **kwargs):
    return Message(
        message_id=message_id,
        date=datetime(2024, 1, 1),
        chat=Chat(id=CHAT.value, type=chat_type, title="Test chat"),
        from_user=User(id=MEMBER.value, is_bot=False, first_name="Анна"),
        text=text,
        **kwargs,
    )


def test_to_incoming_collects_media():
    photo = [PhotoSize(file_id="a", file_unique_id="b", width=1, height=1)]
    incoming = to_incoming(_message(photo=photo, caption="www.spam.test"))

    assert incoming.chat_id == CHAT
    assert incoming.chat_type == ChatType.SUPERGROUP
    assert incoming.sender_id == MEMBER
    assert incoming.media == frozenset({MediaKind.PHOTO})
    assert incoming.text == "www.spam.test"


def test_to_context_uses_reply():
    reply = Message(
        message_id=90,
        date=datetime(2024, 1, 1),
        chat=Chat(id=CHAT.value, type="supergroup"),
        from_user=User(id=TARGET.value, is_bot=False, first_name="Борис"),
        text="правила",
    )
    ctx = to_context(_message("/mute 1h", reply_to_message=reply), "1h")

    assert ctx.requester_id == MEMBER
    assert ctx.args == ("1h",)
    assert ctx.reply_to_user_id == TARGET
    assert ctx.reply_to_message_id == 90
    assert ctx.reply_to_text == "правила"


@pytest.mark.asyncio
async def test_middleware_drops_consumed_message(pipeline, settings, actuator):
    await settings.set_toggle(CHAT, ToggleKey.ANTILINK, True)
    handler = AsyncMock()

    result = await ModerationMiddleware(pipeline)(handler, _message("https://spam.test"), {})

    assert result is None
    handler.assert_not_awaited()
    assert actuator.names() == ["delete_message"]


@pytest.mark.asyncio
async def test_middleware_deletes_command_after_handler(pipeline, actuator):
    handler = AsyncMock(return_value="handled")
    event = _message("/rules", message_id=7)

    result = await ModerationMiddleware(pipeline)(handler, event, {})

    assert result == "handled"
    handler.assert_awaited_once_with(event, {})
    assert actuator.calls == [("delete_message", CHAT, 7)]


@pytest.mark.asyncio
async def test_middleware_keeps_command_when_handler_fails(pipeline, actuator):
    handler = AsyncMock(side_effect=RuntimeError("boom"))

    with pytest.raises(RuntimeError):
        await ModerationMiddleware(pipeline)(handler, _message("/rules"), {})

    assert actuator.calls == []
