"""Configuration: ``get_settings()`` returns the cached store ledger Settings."""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
