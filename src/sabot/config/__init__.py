"""Configuration management using pydantic-settings."""

from .settings import SabotSettings, clear_settings_cache, get_settings

__all__ = [
    "SabotSettings",
    "clear_settings_cache",
    "get_settings",
]
