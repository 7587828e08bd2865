"""
Centralized settings for bitcolumn.

All fields can be set via ``BITCOLUMN_*`` environment variables (e.g.
``BITCOLUMN_MAX_FLAGS=16``) or through a ``.env`` file.

Examples:
    >>> from bitcolumn.core.settings import get_settings
    >>> get_settings().warn_on_collision
    True

Tags:
    bitcolumn, configuration, settings, pydantic, caching
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BitColumnSettings(BaseSettings):
    """bitcolumn configuration.

    Fields
    ──────
    log_level          : structlog log level
    log_format         : ``console`` or ``json``; empty string auto-detects
    max_flags          : Explicit flag-count limit overriding the per-type bit width
    warn_on_collision  : Also emit ``AccessorCollisionWarning`` via ``warnings``
    database_url       : Default URL for :func:`~bitcolumn.orm.session.create_bitcolumn_engine`
    """

    model_config = SettingsConfigDict(
        env_prefix="BITCOLUMN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="")

    # ── Bit fields ───────────────────────────────────────────────
    max_flags: int | None = Field(default=None, ge=1, description="Override the storage bit width limit")
    warn_on_collision: bool = Field(default=True)

    # ── Database ─────────────────────────────────────────────────
    database_url: str = Field(default="sqlite:///:memory:")
    database_echo: bool = Field(default=False)


_settings_cache: dict[str, BitColumnSettings] = {}


def get_settings(*, _force_reload: bool = False) -> BitColumnSettings:
    """Load, validate, and cache a :class:`BitColumnSettings` instance.

    Pass ``_force_reload=True`` to bypass the cache (tests, env changes).
    """
    if _force_reload or "default" not in _settings_cache:
        _settings_cache["default"] = BitColumnSettings()
    return _settings_cache["default"]


def clear_settings_cache() -> None:
    """Clear the settings cache so the next call re-reads the environment."""
    _settings_cache.clear()


__all__ = [
    "BitColumnSettings",
    "get_settings",
    "clear_settings_cache",
]
