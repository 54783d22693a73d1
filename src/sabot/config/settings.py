"""Environment-based configuration using pydantic-settings.

Example:
    >>> from sabot.config import get_settings
    >>> lgr = get_settings().new()
    >>> lgr.max_len
    0

    # Or with environment variables:
    # SABOT_MAX_LEN=999
    # SABOT_ENABLE_DEBUG=true
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import Field, NonNegativeInt
from pydantic_settings import BaseSettings, SettingsConfigDict

from sabot.logger import Sabot
from sabot.sinks import stderr_sink

if TYPE_CHECKING:
    from sabot.sinks import Sink


class SabotSettings(BaseSettings):
    """Logger configuration.

    Example environment variables:
        SABOT_MAX_LEN=999
        SABOT_ENABLE_DEBUG=true
        SABOT_ENABLE_TRACE=false
    """

    model_config = SettingsConfigDict(
        env_prefix="SABOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True,
    )

    max_len: NonNegativeInt = Field(default=0, description="Longest emitted string value, 0 for no limit")
    enable_debug: bool = Field(default=False, description="Emit debug events")
    enable_trace: bool = Field(default=False, description="Emit trace events")

    def new(self, writer: Sink | None = None, alt_writer: Sink | None = None) -> Sabot:
        """Build a logger from these settings, writing to stderr by default."""
        return Sabot(
            writer=writer if writer is not None else stderr_sink(),
            alt_writer=alt_writer,
            max_len=self.max_len,
            enable_debug=self.enable_debug,
            enable_trace=self.enable_trace,
        )


@lru_cache(maxsize=1)
def get_settings() -> SabotSettings:
    """Get the global settings instance (cached)."""
    return SabotSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
