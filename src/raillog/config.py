"""
Environment-based configuration for raillog.

Uses pydantic-settings to load the scalar logger options from
environment variables and .env files. Code-only options (width
providers, level functions, colorizers, path selectors, reporters and
clocks) are passed to ``create_logger`` directly.

All environment variables are prefixed with ``RAILLOG_``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Logger configuration loaded from ``RAILLOG_``-prefixed environment variables.

    Attributes:
        min_slots: Number of lanes allocated up front.
        width: Total line width. ``None`` follows the terminal, ``0``
            disables wrapping.
        timestamp: Show wall-clock time instead of the elapsed duration.
        slim: Drop the separator glyph between rail lanes.
        colors: Emit ANSI color codes.
        reporter: Default output stream for rendered lines.
        log_level: Level of the library's own structlog diagnostics.
    """

    model_config = SettingsConfigDict(
        env_prefix="RAILLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Lanes ──
    min_slots: int = Field(default=3, ge=0, description="Initial lane count.")

    # ── Layout ──
    width: int | None = Field(
        default=None,
        ge=0,
        description="Line width; unset follows the terminal, 0 disables wrapping.",
    )
    timestamp: bool = Field(default=False, description="Show wall-clock time column.")
    slim: bool = Field(default=False, description="Suppress rail separators.")
    colors: bool = Field(default=True, description="Emit ANSI color codes.")

    # ── Output ──
    reporter: Literal["stdout", "stderr"] = Field(
        default="stdout",
        description="Stream receiving rendered lines.",
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Diagnostics logging level.")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached settings singleton.

    Returns:
        The global ``Settings`` instance.
    """
    return Settings()
