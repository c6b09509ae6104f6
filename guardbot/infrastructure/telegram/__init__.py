"""Адаптеры Telegram Bot API."""

from guardbot.infrastructure.telegram.actuator import TelegramActuator
from guardbot.infrastructure.telegram.admin_lookup import TelegramAdminLookup

__all__ = ["TelegramActuator", "TelegramAdminLookup"]
