"""Схема ключей хранилища."""

from __future__ import annotations

from guardbot.application.models import Identifier, ToggleKey


def toggle_key(toggle: ToggleKey, chat_id: Identifier) -> str:
    return f"{toggle.value}:{chat_id}"


def flood_limit_key(chat_id: Identifier) -> str:
    return f"flood_limit:{chat_id}"


def flood_window_key(chat_id: Identifier) -> str:
    return f"flood_window:{chat_id}"


def rules_key(chat_id: Identifier) -> str:
    return f"rules:{chat_id}"


def welcome_text_key(chat_id: Identifier) -> str:
    return f"welcome_text:{chat_id}"


def warn_key(chat_id: Identifier, user_id: Identifier) -> str:
    return f"warn:{chat_id}:{user_id}"
