"""Роутер команд и панели настроек."""

from __future__ import annotations

from typing import Optional

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.filters.callback_data import CallbackData
from aiogram.types import CallbackQuery, InlineKeyboardMarkup, Message
from aiogram.utils.keyboard import InlineKeyboardBuilder

from guardbot.application.commands import HELP_TEXT, PANEL_HEADER, ModerationCommands, render_panel
from guardbot.application.models import CommandContext, Identifier, SettingsPage, ToggleKey
from guardbot.presentation.mapping import chat_type_of, to_context


class PanelCallback(CallbackData, prefix="panel"):
    page: SettingsPage
    toggle: Optional[ToggleKey] = None


def panel_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for toggle in ToggleKey:
        builder.button(
            text=toggle.label,
            callback_data=PanelCallback(page=SettingsPage.PANEL, toggle=toggle),
        )
    builder.button(text="⬅️ Меню", callback_data=PanelCallback(page=SettingsPage.MAIN))
    builder.adjust(1)
    return builder.as_markup()


def help_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text="⚙️ Панель", callback_data=PanelCallback(page=SettingsPage.PANEL))
    builder.button(text="📜 Правила", callback_data=PanelCallback(page=SettingsPage.RULES))
    builder.adjust(1)
    return builder.as_markup()


def _markup_for(name: str, reply: str) -> Optional[InlineKeyboardMarkup]:
    if name == "panel" and reply.startswith(PANEL_HEADER):
        return panel_keyboard()
    if name in ("help", "start"):
        return help_keyboard()
    return None


def callback_context(query: CallbackQuery) -> CommandContext:
    message = query.message
    return CommandContext(
        chat_id=Identifier(message.chat.id),
        chat_type=chat_type_of(message.chat),
        message_id=message.message_id,
        requester_id=Identifier(query.from_user.id),
        chat_title=message.chat.title or "",
    )


def build_router(commands: ModerationCommands) -> Router:
    """Роутер со всеми командами из реестра ModerationCommands."""
    router = Router(name="commands")

    @router.message(Command(*commands.registry.keys(), ignore_case=True))
    async def on_command(message: Message, command: CommandObject) -> None:
        if message.from_user is None:
            return
        name = command.command.lower()
        reply = await commands.execute(name, to_context(message, command.args))
        if reply is not None:
            await message.reply(reply, reply_markup=_markup_for(name, reply))

    @router.callback_query(PanelCallback.filter(F.toggle.is_not(None)))
    async def on_toggle(query: CallbackQuery, callback_data: PanelCallback) -> None:
        ctx = callback_context(query)
        text, changed = await commands.toggle_from_panel(ctx, callback_data.toggle)
        await query.answer(text)
        if not changed:
            return
        config = await commands.settings.load(ctx.chat_id)
        await query.message.edit_text(render_panel(config), reply_markup=panel_keyboard())

    @router.callback_query(PanelCallback.filter())
    async def on_page(query: CallbackQuery, callback_data: PanelCallback) -> None:
        ctx = callback_context(query)
        if callback_data.page == SettingsPage.RULES:
            await query.message.answer(await commands.settings.rules(ctx.chat_id))
        elif callback_data.page == SettingsPage.MAIN:
            await query.message.edit_text(HELP_TEXT, reply_markup=help_keyboard())
        else:
            reply = await commands.execute("panel", ctx)
            await query.message.answer(reply, reply_markup=_markup_for("panel", reply))
        await query.answer()

    return router
