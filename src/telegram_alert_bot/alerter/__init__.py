"""Alerting layer - formatting and best-effort delivery."""

from telegram_alert_bot.alerter.bot import AlertBotBuilder, MessagingClient, TelegramAlertBot
from telegram_alert_bot.alerter.channels.telegram import DeliveryError, TelegramClient
from telegram_alert_bot.alerter.formatter import (
    derive_project_tag,
    escape_html,
    format_alert,
    get_emoji,
)
from telegram_alert_bot.alerter.models import AlertLevel, AlertRequest, BotConfig
from telegram_alert_bot.alerter.validation import ConfigError, validate_config, validate_token

__all__ = [
    "AlertBotBuilder",
    "AlertLevel",
    "AlertRequest",
    "BotConfig",
    "ConfigError",
    "DeliveryError",
    "MessagingClient",
    "TelegramAlertBot",
    "TelegramClient",
    "derive_project_tag",
    "escape_html",
    "format_alert",
    "get_emoji",
    "validate_config",
    "validate_token",
]
