"""Typed settings loader for the chat bet parser."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_price: float = Field(default=-110, alias="CHAT_BET_DEFAULT_PRICE")
    log_level: str = Field(default="INFO", alias="CHAT_BET_LOG_LEVEL")
    event_timezone: str = Field(default="America/New_York", alias="CHAT_BET_EVENT_TIMEZONE")
    journal_dir: Path | None = Field(default=None, alias="CHAT_BET_JOURNAL_DIR")
    max_print: int = Field(default=50, alias="CHAT_BET_MAX_PRINT")

    @field_validator("journal_dir", "log_level", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any, info: Any) -> Any:
        if isinstance(value, str) and value.strip() == "":
            return "INFO" if info.field_name == "log_level" else None
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("CHAT_BET_LOG_LEVEL must be a standard logging level name.")
        return level

    @model_validator(mode="after")
    def validate_values(self) -> Settings:
        if abs(self.default_price) < 100:
            raise ValueError("CHAT_BET_DEFAULT_PRICE must be an American price (|price| >= 100).")
        if self.max_print <= 0:
            raise ValueError("CHAT_BET_MAX_PRINT must be > 0.")
        try:
            ZoneInfo(self.event_timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(
                f"CHAT_BET_EVENT_TIMEZONE is not a known timezone: {self.event_timezone}"
            ) from exc
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary for startup logging and journaling."""
        return {
            "default_price": self.default_price,
            "log_level": self.log_level,
            "event_timezone": self.event_timezone,
            "journal_dir": str(self.journal_dir) if self.journal_dir else None,
            "max_print": self.max_print,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc

    if settings.journal_dir is not None:
        settings.journal_dir.mkdir(parents=True, exist_ok=True)
    return settings
