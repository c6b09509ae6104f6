"""Преобразование объектов aiogram в типы application слоя."""

from __future__ import annotations

from typing import Optional

from aiogram.types import Chat, Message

from guardbot.application.models import (
    ChatType,
    CommandContext,
    Identifier,
    IncomingMessage,
    MediaKind,
)


def chat_type_of(chat: Chat) -> ChatType:
    return ChatType(getattr(chat.type, "value", chat.type))


def to_incoming(message: Message) -> IncomingMessage:
    media = frozenset(kind for kind in MediaKind if getattr(message, kind.value, None))
    user = message.from_user
    return IncomingMessage(
        chat_id=Identifier(message.chat.id),
        chat_type=chat_type_of(message.chat),
        message_id=message.message_id,
        sender_id=Identifier(user.id) if user else None,
        text=message.text or message.caption or "",
        media=media,
        sender_is_bot=bool(user and user.is_bot),
    )


def to_context(message: Message, args: Optional[str]) -> CommandContext:
    reply = message.reply_to_message
    reply_user = reply.from_user if reply else None
    return CommandContext(
        chat_id=Identifier(message.chat.id),
        chat_type=chat_type_of(message.chat),
        message_id=message.message_id,
        requester_id=Identifier(message.from_user.id),
        args=tuple((args or "").split()),
        chat_title=message.chat.title or "",
        reply_to_user_id=Identifier(reply_user.id) if reply_user else None,
        reply_to_message_id=reply.message_id if reply else None,
        reply_to_text=(reply.text or reply.caption) if reply else None,
    )
