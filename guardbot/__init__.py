"""Guardbot: бот модерации групповых чатов Telegram."""

__version__ = "0.1.0"
