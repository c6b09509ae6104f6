"""DI-контейнер приложения."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import redis.asyncio as redis
from aiogram import Bot

from guardbot.application.admin_gate import AdminGate
from guardbot.application.chat_settings import ChatSettingsService
from guardbot.application.commands import ModerationCommands
from guardbot.application.contracts import ConfigStoreContract
from guardbot.application.flood_guard import FloodGuard
from guardbot.application.models import Identifier
from guardbot.application.pipeline import ModerationPipeline
from guardbot.application.warn_ledger import WarnLedger
from guardbot.database.db import Database
from guardbot.infrastructure.config import (
    InMemoryConfigStore,
    InMemoryFloodState,
    RedisConfigStore,
    RedisFloodState,
    SqliteConfigStore,
)
from guardbot.infrastructure.monitoring import init_monitoring
from guardbot.infrastructure.telegram import TelegramActuator, TelegramAdminLookup

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("memory", "sqlite", "redis")


@dataclass(frozen=True)
class BotServices:
    """Контейнер зависимостей, требующих экземпляр бота."""

    settings: ChatSettingsService
    pipeline: ModerationPipeline
    commands: ModerationCommands


def _owner_from_env() -> Optional[Identifier]:
    raw = os.getenv("OWNER_ID")
    if not raw:
        logger.warning("OWNER_ID не задан, команды владельца недоступны")
        return None
    try:
        return Identifier.parse(raw)
    except ValueError:
        logger.warning(f"OWNER_ID некорректен: {raw!r}, команды владельца недоступны")
        return None


class Container:
    """Простой DI-контейнер с фабриками."""

    def __init__(self) -> None:
        init_monitoring()
        os.environ.setdefault("DB_PATH", str(Path("data") / "guardbot.db"))
        self.token = os.getenv("BOT_TOKEN", "")
        self.owner_id = _owner_from_env()
        self.use_metrics = os.getenv("USE_METRICS", "False").lower() == "true"
        self.metrics_port = int(os.getenv("METRICS_PORT", "8000"))
        self.store_timeout = float(os.getenv("STORE_TIMEOUT_SECONDS", "5"))
        self.actuator_timeout = float(os.getenv("ACTUATOR_TIMEOUT_SECONDS", "10"))
        self.webhook_url = os.getenv("WEBHOOK_URL")
        self.webhook_path = os.getenv("WEBHOOK_PATH", "/webhook")
        self.webhook_host = os.getenv("WEBHOOK_HOST", "0.0.0.0")
        self.webhook_port = int(os.getenv("WEBHOOK_PORT", "8080"))

        self.store_backend = os.getenv("STORE_BACKEND", "sqlite").lower()
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"STORE_BACKEND должен быть одним из {STORE_BACKENDS}, получено {self.store_backend!r}"
            )
        self.redis_url = os.getenv("REDIS_URL")
        self.db: Optional[Database] = None
        self.flood_client: Optional[redis.Redis] = None
        self.store = self.build_store()
        self.flood_state, self.clock = self.build_flood_state()

    def build_store(self) -> ConfigStoreContract:
        """Создать хранилище настроек по STORE_BACKEND."""

        if self.store_backend == "memory":
            logger.warning("Настройки хранятся в памяти и будут потеряны при перезапуске")
            return InMemoryConfigStore()
        if self.store_backend == "redis":
            if not self.redis_url:
                raise ValueError("Для STORE_BACKEND=redis требуется REDIS_URL")
            return RedisConfigStore.from_url(self.redis_url, self.store_timeout)
        self.db = Database(timeout=self.store_timeout)
        return SqliteConfigStore(self.db)

    def build_flood_state(self) -> tuple:
        """Состояние антифлуда и часы для него."""

        if os.getenv("FLOOD_BACKEND", "memory").lower() == "redis":
            if not self.redis_url:
                raise ValueError("Для FLOOD_BACKEND=redis требуется REDIS_URL")
            self.flood_client = redis.from_url(
                self.redis_url, decode_responses=True, socket_timeout=self.store_timeout
            )
            return RedisFloodState(self.flood_client, timeout=self.store_timeout), time.time
        return InMemoryFloodState(), time.monotonic

    async def setup(self) -> None:
        if self.db is not None:
            await self.db.setup()
        if isinstance(self.store, RedisConfigStore):
            await self.store.ping()

    async def close(self) -> None:
        await self.store.close()
        if self.flood_client is not None:
            await self.flood_client.aclose()

    def build_services(self, bot: Bot) -> BotServices:
        """Создать сервисы, которым нужен экземпляр бота."""

        actuator = TelegramActuator(bot, self.actuator_timeout)
        gate = AdminGate(TelegramAdminLookup(bot, self.actuator_timeout), self.owner_id)
        settings = ChatSettingsService(self.store)
        pipeline = ModerationPipeline(
            settings,
            FloodGuard(self.flood_state, self.clock),
            actuator,
        )
        commands = ModerationCommands(settings, WarnLedger(self.store), actuator, gate)
        return BotServices(settings=settings, pipeline=pipeline, commands=commands)
