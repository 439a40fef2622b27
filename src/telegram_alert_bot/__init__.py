"""Telegram Alert Bot - project-tagged alerts for Telegram forum threads."""

import logging

from telegram_alert_bot.alerter import (
    AlertBotBuilder,
    AlertLevel,
    BotConfig,
    ConfigError,
    DeliveryError,
    TelegramAlertBot,
    TelegramClient,
)

__version__ = "0.1.0"

# Silent unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AlertBotBuilder",
    "AlertLevel",
    "BotConfig",
    "ConfigError",
    "DeliveryError",
    "TelegramAlertBot",
    "TelegramClient",
    "__version__",
]
