"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.player.value_objects import PlaybackMode
from ..domain.shared.constants import PlaybackConstants
from ..domain.shared.messages import ErrorMessages


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/player.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: int = Field(
        default=5000,
        ge=1000,
        le=30000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: int = Field(
        default=10,
        ge=1,
        le=60,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class PlayerSettings(BaseModel):
    """Playback session behaviour."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    default_mode: PlaybackMode = PlaybackMode.SEQUENTIAL
    restart_threshold_seconds: float = Field(
        default=PlaybackConstants.RESTART_THRESHOLD_SECONDS,
        ge=0.0,
        validation_alias=AliasChoices("restart_threshold_seconds", "restart_threshold"),
    )
    load_timeout_seconds: float = Field(
        default=PlaybackConstants.DEFAULT_LOAD_TIMEOUT_SECONDS,
        gt=0.0,
        le=120.0,
        validation_alias=AliasChoices("load_timeout_seconds", "load_timeout"),
    )


class PersistenceSettings(BaseModel):
    """Snapshot autosave configuration."""

    model_config = SettingsConfigDict(frozen=True)

    autosave_enabled: bool = True
    autosave_interval_seconds: float = Field(default=30.0, gt=0.0)


class AudioSettings(BaseModel):
    """Audio engine configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    progress_interval_seconds: float = Field(
        default=PlaybackConstants.DEFAULT_PROGRESS_INTERVAL_SECONDS, gt=0.0, le=5.0
    )
    vlc_args: tuple[str, ...] = Field(
        default=("--no-video", "--quiet"),
        validation_alias=AliasChoices("vlc_args", "vlc_options"),
    )

    @field_validator("vlc_args", mode="before")
    @classmethod
    def split_vlc_args(cls, v: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
        """Accept a space-separated string as well as a JSON array."""
        if isinstance(v, str):
            if v.lstrip().startswith("["):
                return tuple(json.loads(v))
            return tuple(v.split())
        return tuple(v)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DATABASE__URL, DATABASE__BUSY_TIMEOUT_MS, ...
    - PLAYER__DEFAULT_VOLUME, PLAYER__LOAD_TIMEOUT_SECONDS, ...
    - PERSISTENCE__AUTOSAVE_INTERVAL_SECONDS, ...
    - AUDIO__VLC_ARGS, AUDIO__PROGRESS_INTERVAL_SECONDS
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    player: PlayerSettings = Field(default_factory=PlayerSettings)
    persistence: PersistenceSettings = Field(default_factory=PersistenceSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
