from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import ADMIN, CHAT, MEMBER, TARGET
from guardbot.application.admin_gate import DENIED_ADMIN
from guardbot.application.commands import HELP_TEXT, PANEL_HEADER, render_panel
from guardbot.application.errors import StoreUnavailable
from guardbot.application.models import SettingsPage, ToggleKey
from guardbot.presentation import commands as command_handlers
from guardbot.presentation import events
from guardbot.presentation.commands import PanelCallback


def _callbacks(router):
    on_toggle, on_page = [handler.callback for handler in router.callback_query.handlers]
    return on_toggle, on_page


def _query(user):
    query = MagicMock()
    query.from_user.id = user.value
    query.message.chat.id = CHAT.value
    query.message.chat.type = "supergroup"
    query.message.chat.title = "Test chat"
    query.message.message_id = 55
    query.message.edit_text = AsyncMock()
    query.message.answer = AsyncMock()
    query.answer = AsyncMock()
    return query


def _member(user_id, name, is_bot=False, username=None):
    member = MagicMock()
    member.id = user_id
    member.is_bot = is_bot
    member.full_name = name
    member.username = username
    return member


def _join_message(*members):
    message = MagicMock()
    message.chat.id = CHAT.value
    message.chat.title = "Test chat"
    message.new_chat_members = list(members)
    message.answer = AsyncMock()
    return message


@pytest.mark.asyncio
async def test_denied_toggle_does_not_edit_panel(commands, store):
    on_toggle, _ = _callbacks(command_handlers.build_router(commands))
    query = _query(MEMBER)

    await on_toggle(query, PanelCallback(page=SettingsPage.PANEL, toggle=ToggleKey.ANTILINK))

    query.answer.assert_awaited_once_with(DENIED_ADMIN)
    query.message.edit_text.assert_not_awaited()
    assert store.data == {}


@pytest.mark.asyncio
async def test_admin_toggle_edits_panel(commands, settings):
    on_toggle, _ = _callbacks(command_handlers.build_router(commands))
    query = _query(ADMIN)

    await on_toggle(query, PanelCallback(page=SettingsPage.PANEL, toggle=ToggleKey.ANTILINK))

    query.answer.assert_awaited_once_with("AntiLink: включено")
    config = await settings.load(CHAT)
    assert config.antilink_enabled is True
    query.message.edit_text.assert_awaited_once()
    assert query.message.edit_text.await_args.args == (render_panel(config),)


@pytest.mark.asyncio
async def test_rules_page(commands, settings):
    await settings.set_rules(CHAT, "Без спама.")
    _, on_page = _callbacks(command_handlers.build_router(commands))
    query = _query(MEMBER)

    await on_page(query, PanelCallback(page=SettingsPage.RULES))

    query.message.answer.assert_awaited_once_with("Без спама.")
    query.answer.assert_awaited_once_with()


@pytest.mark.asyncio
async def test_main_page_shows_help(commands):
    _, on_page = _callbacks(command_handlers.build_router(commands))
    query = _query(MEMBER)

    await on_page(query, PanelCallback(page=SettingsPage.MAIN))

    assert query.message.edit_text.await_args.args == (HELP_TEXT,)


@pytest.mark.asyncio
async def test_panel_page_requires_admin(commands):
    _, on_page = _callbacks(command_handlers.build_router(commands))
    admin_query, member_query = _query(ADMIN), _query(MEMBER)

    await on_page(admin_query, PanelCallback(page=SettingsPage.PANEL))
    await on_page(member_query, PanelCallback(page=SettingsPage.PANEL))

    assert admin_query.message.answer.await_args.args[0].startswith(PANEL_HEADER)
    assert admin_query.message.answer.await_args.kwargs["reply_markup"] is not None
    assert member_query.message.answer.await_args.args == (DENIED_ADMIN,)
    assert member_query.message.answer.await_args.kwargs["reply_markup"] is None


@pytest.mark.asyncio
async def test_command_handler_replies(commands):
    router = command_handlers.build_router(commands)
    on_command = router.message.handlers[0].callback
    message = MagicMock()
    message.from_user.id = MEMBER.value
    message.chat.id = CHAT.value
    message.chat.type = "supergroup"
    message.chat.title = "Test chat"
    message.message_id = 7
    message.reply_to_message = None
    message.reply = AsyncMock()
    command = MagicMock(command="PING", args=None)

    await on_command(message, command)

    assert message.reply.await_args.args[0].startswith("Pong")


@pytest.mark.asyncio
async def test_welcome_disabled(settings):
    on_new_members = events.build_router(settings).message.handlers[0].callback
    message = _join_message(_member(TARGET.value, "Борис"))

    await on_new_members(message)

    message.answer.assert_not_awaited()


@pytest.mark.asyncio
async def test_welcome_skips_bots(settings):
    await settings.set_toggle(CHAT, ToggleKey.WELCOME, True)
    await settings.set_welcome_template(CHAT, "Привет, {username}!")
    on_new_members = events.build_router(settings).message.handlers[0].callback
    message = _join_message(
        _member(99, "Spam Bot", is_bot=True, username="spam_bot"),
        _member(TARGET.value, "Борис", username="boris"),
        _member(MEMBER.value, "Анна"),
    )

    await on_new_members(message)

    assert [call.args for call in message.answer.await_args_list] == [
        ("Привет, @boris!",),
        ("Привет, Анна!",),
    ]


@pytest.mark.asyncio
async def test_store_failure_is_answered():
    on_error = events.build_router(MagicMock()).errors.handlers[0].callback
    event = MagicMock()
    event.exception = StoreUnavailable("SQLite недоступен")
    event.update.update_id = 1
    event.update.message.answer = AsyncMock()

    await on_error(event)

    event.update.message.answer.assert_awaited_once_with(events.SERVICE_UNAVAILABLE)


@pytest.mark.asyncio
async def test_store_failure_without_message():
    on_error = events.build_router(MagicMock()).errors.handlers[0].callback
    event = MagicMock()
    event.exception = StoreUnavailable("SQLite недоступен")
    event.update.message = None

    await on_error(event)
