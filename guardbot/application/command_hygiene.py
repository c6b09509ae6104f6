"""Автоудаление сообщений с командами."""

from __future__ import annotations

from guardbot.application.models import ChatType


def should_delete_command_message(chat_type: ChatType, autodelete_enabled: bool) -> bool:
    """Нужно ли удалить сообщение с командой после её выполнения.

    В личных чатах команды не удаляются никогда.
    """
    return autodelete_enabled and chat_type != ChatType.PRIVATE
