"""Конвейер модерации входящих сообщений.

Порядок проверок фиксирован: антифлуд, антиссылки, блокировка медиа.
Первое сработавшее правило поглощает сообщение: дальнейшие проверки и
обработка команд не выполняются. Ошибки актуатора не останавливают
конвейер, ошибки хранилища (StoreUnavailable) пробрасываются наружу.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from guardbot.application import content_filter
from guardbot.application.actions import perform
from guardbot.application.chat_settings import ChatSettingsService
from guardbot.application.command_hygiene import should_delete_command_message
from guardbot.application.contracts import ActuatorContract
from guardbot.application.flood_guard import FloodGuard
from guardbot.application.models import (
    FLOOD_MUTE,
    ActionResult,
    ChatConfig,
    ChatType,
    IncomingMessage,
)
from guardbot.utils.monitoring import observe_pipeline_latency, track_automod_action, track_message

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    SKIPPED = "skipped"
    FLOOD = "flood"
    ANTILINK = "antilink"
    LOCKMEDIA = "lockmedia"
    PASSED = "passed"


@dataclass
class Verdict:
    """Результат проверки одного сообщения."""

    state: PipelineState
    config: Optional[ChatConfig] = None
    actions: List[ActionResult] = field(default_factory=list)

    @property
    def consumed(self) -> bool:
        return self.state in (PipelineState.FLOOD, PipelineState.ANTILINK, PipelineState.LOCKMEDIA)


class ModerationPipeline:
    def __init__(
        self,
        settings: ChatSettingsService,
        flood_guard: FloodGuard,
        actuator: ActuatorContract,
    ) -> None:
        self.settings = settings
        self.flood_guard = flood_guard
        self.actuator = actuator

    async def process(self, message: IncomingMessage) -> Verdict:
        """Проверить сообщение.

        Args:
            message: Входящее сообщение

        Returns:
            Verdict: Поглощено ли сообщение и какие действия запрошены
        """
        if message.sender_id is None or message.sender_is_bot:
            return Verdict(PipelineState.SKIPPED)
        if message.chat_type in (ChatType.PRIVATE, ChatType.CHANNEL):
            return Verdict(PipelineState.SKIPPED)

        started = time.perf_counter()
        track_message(str(message.chat_id))
        try:
            config = await self.settings.load(message.chat_id)
            verdict = await self._evaluate(message, config)
        finally:
            observe_pipeline_latency(time.perf_counter() - started)

        if verdict.consumed:
            track_automod_action(verdict.state.value, str(message.chat_id))
            logger.info(
                f"Сообщение {message.message_id} от {message.sender_id} в чате "
                f"{message.chat_id} поглощено: {verdict.state.value}"
            )
        return verdict

    async def _evaluate(self, message: IncomingMessage, config: ChatConfig) -> Verdict:
        if config.antiflood_enabled:
            flooded = await self.flood_guard.check(
                message.chat_id,
                message.sender_id,
                config.flood_window_seconds,
                config.flood_limit,
            )
            if flooded:
                actions = [
                    await self._delete(message),
                    await perform(
                        "mute",
                        self.actuator.mute(message.chat_id, message.sender_id, FLOOD_MUTE),
                    ),
                ]
                return Verdict(PipelineState.FLOOD, config, actions)

        if config.antilink_enabled and content_filter.is_link_content(message.text):
            return Verdict(PipelineState.ANTILINK, config, [await self._delete(message)])

        if config.lockmedia_enabled and content_filter.has_restricted_media(message.media):
            return Verdict(PipelineState.LOCKMEDIA, config, [await self._delete(message)])

        logger.debug(f"Сообщение {message.message_id} в чате {message.chat_id} прошло проверки")
        return Verdict(PipelineState.PASSED, config)

    async def after_dispatch(self, message: IncomingMessage, verdict: Verdict) -> Optional[ActionResult]:
        """Удалить сообщение с командой после её выполнения.

        Используются настройки, загруженные до обработки команды.
        """
        if verdict.state != PipelineState.PASSED or verdict.config is None:
            return None
        if not message.is_command:
            return None
        if not should_delete_command_message(
            message.chat_type, verdict.config.autodelete_commands_enabled
        ):
            return None
        return await self._delete(message)

    async def _delete(self, message: IncomingMessage) -> ActionResult:
        return await perform(
            "delete", self.actuator.delete_message(message.chat_id, message.message_id)
        )
