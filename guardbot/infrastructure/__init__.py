"""Инфраструктурный слой."""
