"""Команды модерации, независимые от платформы.

Каждая команда получает CommandContext и возвращает текст ответа (или None,
если отвечать не нужно). Ошибки авторизации и некорректные аргументы
превращаются в ответ пользователю, StoreUnavailable пробрасывается.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Tuple

from guardbot.application import parsing
from guardbot.application.actions import failure_reply, perform
from guardbot.application.admin_gate import AdminGate
from guardbot.application.chat_settings import SETFLOOD_USAGE, ChatSettingsService
from guardbot.application.contracts import ActuatorContract
from guardbot.application.errors import AuthorizationError, ConfigurationError
from guardbot.application.models import (
    WARN_LIMIT,
    ChatConfig,
    ChatType,
    CommandContext,
    Role,
    ToggleKey,
)
from guardbot.application.warn_ledger import WarnLedger
from guardbot.utils.monitoring import track_command

logger = logging.getLogger(__name__)

BOT_NAME = "Guardbot"

HELP_TEXT = (
    f"🛡️ {BOT_NAME}\n\n"
    "Настройки (админы):\n"
    "/panel — панель настроек\n"
    "/antilink, /lockmedia, /autodelcmd, /antiflood, /welcome on|off\n"
    "/setflood <лимит> <секунды>\n"
    "/setrules, /setwelcome — ответом на сообщение с текстом\n\n"
    "Модерация (админы):\n"
    "/warn, /resetwarn, /ban, /kick, /mute [30m|1h|7d], /unmute, /purge [n]\n\n"
    "Для всех:\n"
    "/rules, /warnings, /ping"
)

PANEL_HEADER = "Панель настроек:"

GROUP_ONLY = "Команда работает только в группах."

Handler = Callable[[CommandContext], Awaitable[Optional[str]]]


@dataclass(frozen=True)
class CommandSpec:
    role: Role
    handler: Handler
    group_only: bool = False


_SWITCH_COMMANDS = {
    "antilink": ToggleKey.ANTILINK,
    "lockmedia": ToggleKey.LOCKMEDIA,
    "autodelcmd": ToggleKey.AUTODELCMD,
    "antiflood": ToggleKey.ANTIFLOOD,
    "welcome": ToggleKey.WELCOME,
}


def _state(value: bool) -> str:
    return "включено" if value else "выключено"


def render_panel(config: ChatConfig) -> str:
    lines = [PANEL_HEADER]
    for toggle in ToggleKey:
        mark = "✅" if config.is_enabled(toggle) else "❌"
        lines.append(f"{mark} {toggle.label}")
    lines.append(
        f"Антифлуд: {config.flood_limit} сообщений за {config.flood_window_seconds} с"
    )
    return "\n".join(lines)


class ModerationCommands:
    """Набор команд бота."""

    def __init__(
        self,
        settings: ChatSettingsService,
        ledger: WarnLedger,
        actuator: ActuatorContract,
        gate: AdminGate,
    ) -> None:
        self.settings = settings
        self.ledger = ledger
        self.actuator = actuator
        self.gate = gate
        self.registry: Dict[str, CommandSpec] = {
            "ping": CommandSpec(Role.MEMBER, self.ping),
            "start": CommandSpec(Role.MEMBER, self.help),
            "help": CommandSpec(Role.MEMBER, self.help),
            "rules": CommandSpec(Role.MEMBER, self.rules, group_only=True),
            "warnings": CommandSpec(Role.MEMBER, self.warnings, group_only=True),
            "owner": CommandSpec(Role.OWNER, self.owner),
            "leave": CommandSpec(Role.OWNER, self.leave, group_only=True),
            "panel": CommandSpec(Role.ADMIN, self.panel, group_only=True),
            "setflood": CommandSpec(Role.ADMIN, self.setflood, group_only=True),
            "setrules": CommandSpec(Role.ADMIN, self.setrules, group_only=True),
            "setwelcome": CommandSpec(Role.ADMIN, self.setwelcome, group_only=True),
            "warn": CommandSpec(Role.ADMIN, self.warn, group_only=True),
            "resetwarn": CommandSpec(Role.ADMIN, self.resetwarn, group_only=True),
            "ban": CommandSpec(Role.ADMIN, self.ban, group_only=True),
            "kick": CommandSpec(Role.ADMIN, self.kick, group_only=True),
            "mute": CommandSpec(Role.ADMIN, self.mute, group_only=True),
            "unmute": CommandSpec(Role.ADMIN, self.unmute, group_only=True),
            "purge": CommandSpec(Role.ADMIN, self.purge, group_only=True),
        }
        for name, toggle in _SWITCH_COMMANDS.items():
            self.registry[name] = CommandSpec(
                Role.ADMIN, self._switch_handler(name, toggle), group_only=True
            )

    async def execute(self, name: str, ctx: CommandContext) -> Optional[str]:
        """Выполнить команду по имени.

        Args:
            name: Имя команды без слэша
            ctx: Контекст вызова

        Returns:
            Optional[str]: Текст ответа
        """
        command = self.registry.get(name.lower())
        if command is None:
            return None
        if command.group_only and ctx.chat_type == ChatType.PRIVATE:
            return GROUP_ONLY
        try:
            await self.gate.require(command.role, ctx.chat_id, ctx.requester_id)
            reply = await command.handler(ctx)
        except AuthorizationError as e:
            track_command(name, success=False)
            logger.info(f"Команда /{name} от {ctx.requester_id} отклонена: {e.message}")
            return e.message
        except ConfigurationError as e:
            track_command(name, success=False)
            return e.usage
        track_command(name, success=True)
        return reply

    async def ping(self, ctx: CommandContext) -> str:
        return "Pong! Бот активен."

    async def help(self, ctx: CommandContext) -> str:
        return HELP_TEXT

    async def rules(self, ctx: CommandContext) -> str:
        return await self.settings.rules(ctx.chat_id)

    async def owner(self, ctx: CommandContext) -> str:
        return "Ты владелец бота."

    async def leave(self, ctx: CommandContext) -> Optional[str]:
        result = await perform("leave", self.actuator.leave_chat(ctx.chat_id))
        if not result.ok:
            return failure_reply(result, "покинуть чат")
        return None

    async def panel(self, ctx: CommandContext) -> str:
        return render_panel(await self.settings.load(ctx.chat_id))

    async def toggle_from_panel(self, ctx: CommandContext, toggle: ToggleKey) -> Tuple[str, bool]:
        """Переключить настройку кнопкой панели (только админы).

        Returns:
            tuple: Текст для всплывающего ответа и признак, что настройка изменилась
        """
        try:
            await self.gate.require(Role.ADMIN, ctx.chat_id, ctx.requester_id)
        except AuthorizationError as e:
            track_command("panel", success=False)
            return e.message, False
        value = await self.settings.flip_toggle(ctx.chat_id, toggle)
        track_command("panel", success=True)
        return f"{toggle.label}: {_state(value)}", True

    def _switch_handler(self, name: str, toggle: ToggleKey) -> Handler:
        usage = f"Использование: /{name} on|off"

        async def handler(ctx: CommandContext) -> str:
            value = parsing.parse_switch(ctx.args, usage)
            await self.settings.set_toggle(ctx.chat_id, toggle, value)
            return f"{toggle.label}: {_state(value)}"

        return handler

    async def setflood(self, ctx: CommandContext) -> str:
        limit, window = parsing.parse_setflood(ctx.args, SETFLOOD_USAGE)
        limit, window = await self.settings.set_flood(ctx.chat_id, limit, window)
        return f"Антифлуд: не более {limit} сообщений за {window} с."

    def _reply_text(self, ctx: CommandContext, usage: str) -> str:
        text = ctx.reply_to_text or " ".join(ctx.args)
        if not text.strip():
            raise ConfigurationError(usage)
        return text

    async def setrules(self, ctx: CommandContext) -> str:
        text = self._reply_text(ctx, "Ответьте командой /setrules на сообщение с правилами.")
        await self.settings.set_rules(ctx.chat_id, text)
        return "Правила сохранены."

    async def setwelcome(self, ctx: CommandContext) -> str:
        text = self._reply_text(
            ctx,
            "Ответьте командой /setwelcome на сообщение с шаблоном. "
            "Доступно: {name}, {username}, {id}, {chat}",
        )
        await self.settings.set_welcome_template(ctx.chat_id, text)
        return "Шаблон приветствия сохранён."

    async def warn(self, ctx: CommandContext) -> str:
        target, _ = parsing.resolve_target(ctx, "Использование: /warn ответом или /warn <user_id>")
        count = await self.ledger.warn(ctx.chat_id, target)
        reply = f"Пользователь {target} получил предупреждение ({count}/{WARN_LIMIT})."
        if count >= WARN_LIMIT:
            result = await perform("ban", self.actuator.ban(ctx.chat_id, target))
            if result.ok:
                logger.info(f"Автобан {target} в чате {ctx.chat_id}: {count} предупреждений")
                reply += f"\nЛимит предупреждений достигнут, пользователь {target} забанен."
            else:
                reply += "\n" + failure_reply(result, "забанить")
        return reply

    async def resetwarn(self, ctx: CommandContext) -> str:
        target, _ = parsing.resolve_target(
            ctx, "Использование: /resetwarn ответом или /resetwarn <user_id>"
        )
        await self.ledger.reset(ctx.chat_id, target)
        return f"Предупреждения пользователя {target} сброшены."

    async def warnings(self, ctx: CommandContext) -> str:
        if ctx.reply_to_user_id is not None or ctx.args:
            target, _ = parsing.resolve_target(ctx, "Использование: /warnings [user_id]")
        else:
            target = ctx.requester_id
        count = await self.ledger.get(ctx.chat_id, target)
        return f"Предупреждения пользователя {target}: {count}/{WARN_LIMIT}"

    async def ban(self, ctx: CommandContext) -> str:
        target, _ = parsing.resolve_target(ctx, "Использование: /ban ответом или /ban <user_id>")
        result = await perform("ban", self.actuator.ban(ctx.chat_id, target))
        if not result.ok:
            return failure_reply(result, "забанить")
        return f"Пользователь {target} забанен."

    async def kick(self, ctx: CommandContext) -> str:
        target, _ = parsing.resolve_target(ctx, "Использование: /kick ответом или /kick <user_id>")
        result = await perform("kick", self.actuator.kick(ctx.chat_id, target))
        if not result.ok:
            return failure_reply(result, "выгнать")
        return f"Пользователь {target} выгнан."

    async def mute(self, ctx: CommandContext) -> str:
        target, rest = parsing.resolve_target(
            ctx, "Использование: /mute ответом [30m|1h|7d] или /mute <user_id> [длительность]"
        )
        duration = parsing.parse_duration(rest[0] if rest else None)
        result = await perform("mute", self.actuator.mute(ctx.chat_id, target, duration))
        if not result.ok:
            return failure_reply(result, "замутить")
        return f"Пользователь {target} замучен на {parsing.format_duration(duration)}."

    async def unmute(self, ctx: CommandContext) -> str:
        target, _ = parsing.resolve_target(
            ctx, "Использование: /unmute ответом или /unmute <user_id>"
        )
        result = await perform("unmute", self.actuator.unmute(ctx.chat_id, target))
        if not result.ok:
            return failure_reply(result, "размутить")
        return f"Пользователь {target} размучен."

    async def purge(self, ctx: CommandContext) -> str:
        message_ids = parsing.purge_message_ids(
            ctx, "Использование: /purge <1-100> или /purge ответом на сообщение"
        )
        if not message_ids:
            return "Нечего удалять."
        result = await perform("purge", self.actuator.delete_messages(ctx.chat_id, message_ids))
        if not result.ok:
            return failure_reply(result, "очистить сообщения")
        return f"Удалено сообщений: {len(message_ids)}"
