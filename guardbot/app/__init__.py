"""Сборка приложения и точка входа."""
