"""Configuration management service with Pydantic Settings.

This module loads the bot token, destination and project name from
environment variables (or a ``.env`` file) for the command-line entry
point. Library users construct a BotConfig directly instead.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from telegram_alert_bot.alerter.models import BotConfig


class TelegramSettings(BaseSettings):
    """Telegram destination settings."""

    model_config = SettingsConfigDict(
        env_prefix="TELEGRAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bot_token: SecretStr | None = Field(
        default=None,
        alias="TELEGRAM_BOT_TOKEN",
        description="Telegram bot token",
    )
    chat_id: str | None = Field(
        default=None,
        alias="TELEGRAM_CHAT_ID",
        description="Telegram chat ID for alerts",
    )
    thread_id: int | None = Field(
        default=None,
        alias="TELEGRAM_THREAD_ID",
        description="Forum thread ID inside the chat",
        ge=1,
    )

    @field_validator("chat_id")
    @classmethod
    def validate_chat_id(cls, v: str | None) -> str | None:
        """Reject blank chat IDs."""
        if v is not None and not v.strip():
            raise ValueError("TELEGRAM_CHAT_ID must not be blank")
        return v

    @property
    def enabled(self) -> bool:
        """Check if every value needed to send is present."""
        return (
            self.bot_token is not None and self.chat_id is not None and self.thread_id is not None
        )


class Settings(BaseSettings):
    """Main application settings.

    Example:
        ```python
        from telegram_alert_bot.config import get_settings

        settings = get_settings()
        bot = TelegramAlertBot(settings.bot_token(), settings.bot_config())
        ```
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    telegram: TelegramSettings = Field(default_factory=TelegramSettings)

    project_name: str | None = Field(
        default=None,
        alias="PROJECT_NAME",
        description="Human-readable project name shown as a tag",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    dry_run: bool = Field(
        default=False,
        alias="DRY_RUN",
        description="Print alerts instead of sending them",
    )

    def get_logging_level(self) -> int:
        """Get the numeric logging level."""
        level: int = getattr(logging, self.log_level)
        return level

    def bot_token(self) -> str:
        """Get the raw bot token, or an empty string if unset."""
        if self.telegram.bot_token is None:
            return ""
        return self.telegram.bot_token.get_secret_value()

    def bot_config(self) -> BotConfig:
        """Build a BotConfig from the loaded values.

        Missing values are passed through as empty/zero so that bot
        construction reports them as a ConfigError.
        """
        return BotConfig(
            chat_id=self.telegram.chat_id or "",
            thread_id=self.telegram.thread_id or 0,
            project_name=self.project_name or "",
        )

    def redacted_summary(self) -> dict[str, str]:
        """Get a summary of settings with secrets redacted.

        Returns:
            Dictionary of settings with sensitive values masked.
        """
        return {
            "bot_token": "(set)" if self.telegram.bot_token else "(not set)",
            "chat_id": self.telegram.chat_id or "(not set)",
            "thread_id": str(self.telegram.thread_id) if self.telegram.thread_id else "(not set)",
            "project_name": self.project_name or "(not set)",
            "log_level": self.log_level,
            "dry_run": str(self.dry_run),
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The Settings instance.

    Raises:
        ValidationError: If environment variables have invalid values.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when you need to reload settings with
    different environment variables.
    """
    get_settings.cache_clear()
