"""Construction-time validation of bot credentials and configuration."""

from __future__ import annotations

from typing import Any

from telegram_alert_bot.alerter.models import BotConfig


class ConfigError(ValueError):
    """Raised when a bot cannot be constructed from the given configuration."""


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def validate_token(token: Any) -> str:
    """Validate the bot API token.

    Raises:
        ConfigError: If the token is missing, empty, or not a string.
    """
    if not _is_non_empty_str(token):
        raise ConfigError("Invalid bot token")
    return token


def validate_config(config: Any) -> BotConfig:
    """Validate a bot configuration and return it unchanged.

    ``thread_id`` must be an ``int``. Integral floats such as ``7.0`` are
    rejected as well, since nothing is coerced here.

    Args:
        config: Configuration to check.

    Returns:
        The same BotConfig instance.

    Raises:
        ConfigError: If any field is missing or malformed.
    """
    if not isinstance(config, BotConfig):
        raise ConfigError("Bot configuration must be a BotConfig")
    if not _is_non_empty_str(config.chat_id):
        raise ConfigError("Invalid chat_id")
    # bool is an int subclass but never a thread id
    thread_id = config.thread_id
    if isinstance(thread_id, bool) or not isinstance(thread_id, int) or thread_id <= 0:
        raise ConfigError("Invalid thread_id")
    if not _is_non_empty_str(config.project_name):
        raise ConfigError("Invalid project_name")
    return config
