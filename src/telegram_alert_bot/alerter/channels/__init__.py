"""Messaging client implementations."""

from telegram_alert_bot.alerter.channels.telegram import DeliveryError, TelegramClient

__all__ = [
    "DeliveryError",
    "TelegramClient",
]
