"""Пул соединений SQLite."""

from guardbot.database.db import Database

__all__ = ["Database"]
