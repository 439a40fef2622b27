"""Project-tagged alert bot with best-effort delivery."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from telegram_alert_bot.alerter.channels.telegram import TelegramClient
from telegram_alert_bot.alerter.formatter import derive_project_tag, format_alert
from telegram_alert_bot.alerter.models import AlertLevel, AlertRequest, BotConfig
from telegram_alert_bot.alerter.validation import ConfigError, validate_config, validate_token

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger(__name__)

PARSE_MODE_HTML = "HTML"


class MessagingClient(Protocol):
    """Protocol for the client that delivers formatted messages."""

    async def send_message(
        self,
        chat_id: str,
        text: str,
        *,
        parse_mode: str,
        message_thread_id: int,
    ) -> None:
        """Send a message. Raises on delivery failure."""
        ...


class TelegramAlertBot:
    """Sends ERROR/WARNING/LOG alerts to a Telegram forum thread.

    The configuration is validated and the project tag derived once, at
    construction. Sending is best-effort: delivery failures are logged and
    discarded so that alerting never breaks the caller. Only a metadata
    serialization error can escape a send call.

    Example:
        ```python
        bot = (
            TelegramAlertBot.builder(token)
            .set_config(BotConfig(chat_id="-100123", thread_id=7, project_name="Billing"))
            .build()
        )
        await bot.error("Payment webhook failed", {"order_id": 42})
        ```
    """

    def __init__(
        self,
        token: str,
        config: BotConfig,
        *,
        client: MessagingClient | None = None,
        on_delivery_failure: Callable[[AlertLevel, Exception], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the bot.

        Args:
            token: Telegram bot token.
            config: Destination chat, thread and project name.
            client: Messaging client; a TelegramClient for the token by default.
            on_delivery_failure: Called with the level and error when a send fails.
            clock: Source of the timestamp shown in each alert.

        Raises:
            ConfigError: If the token or configuration is invalid.
        """
        validate_token(token)
        self._config = validate_config(config)
        self._project_tag = derive_project_tag(config.project_name)
        self._client: MessagingClient = client if client is not None else TelegramClient(token)
        self._on_delivery_failure = on_delivery_failure
        self._clock = clock

    @classmethod
    def builder(cls, token: str) -> AlertBotBuilder:
        """Start building a bot for the given token."""
        return AlertBotBuilder(token)

    @property
    def config(self) -> BotConfig:
        """The validated configuration."""
        return self._config

    @property
    def project_tag(self) -> str:
        """The tag derived from the project name."""
        return self._project_tag

    def format_message(
        self,
        level: AlertLevel,
        message: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        """Render an alert as it would be sent, timestamped now."""
        request = AlertRequest(level=level, message=message, metadata=metadata)
        return format_alert(request, project_tag=self._project_tag, timestamp=self._clock())

    async def send_alert(
        self,
        level: AlertLevel,
        message: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Format and send one alert, discarding any delivery failure.

        Raises:
            TypeError: If metadata is not JSON serializable.
        """
        text = self.format_message(level, message, metadata)

        try:
            await self._client.send_message(
                self._config.chat_id,
                text,
                parse_mode=PARSE_MODE_HTML,
                message_thread_id=self._config.thread_id,
            )
        except Exception as e:
            logger.warning(
                f"Failed to deliver {level.value} alert for {self._project_tag}: "
                f"{type(e).__name__}: {e}"
            )
            self._notify_failure(level, e)
            return

        logger.debug(f"{level.value} alert delivered for {self._project_tag}")

    def _notify_failure(self, level: AlertLevel, error: Exception) -> None:
        if self._on_delivery_failure is None:
            return
        try:
            self._on_delivery_failure(level, error)
        except Exception:
            logger.exception("Delivery failure callback raised")

    async def error(self, message: str, metadata: Mapping[str, Any] | None = None) -> None:
        """Send an ERROR alert."""
        await self.send_alert(AlertLevel.ERROR, message, metadata)

    async def warning(self, message: str, metadata: Mapping[str, Any] | None = None) -> None:
        """Send a WARNING alert."""
        await self.send_alert(AlertLevel.WARNING, message, metadata)

    async def log(self, message: str, metadata: Mapping[str, Any] | None = None) -> None:
        """Send a LOG alert."""
        await self.send_alert(AlertLevel.LOG, message, metadata)


class AlertBotBuilder:
    """Collects a token and configuration, then builds a TelegramAlertBot.

    No validation happens until build().
    """

    def __init__(self, token: str) -> None:
        self.token = token
        self.config: BotConfig | None = None

    def set_config(self, config: BotConfig) -> AlertBotBuilder:
        """Set the bot configuration. Returns the builder for chaining."""
        self.config = config
        return self

    def build(self) -> TelegramAlertBot:
        """Build the bot.

        Raises:
            ConfigError: If no configuration was set or validation fails.
        """
        if self.config is None:
            raise ConfigError("Bot configuration must be set")
        return TelegramAlertBot(self.token, self.config)
