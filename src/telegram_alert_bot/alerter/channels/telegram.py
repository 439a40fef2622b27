"""Telegram Bot API client implementation."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org/bot{token}/sendMessage"


class DeliveryError(Exception):
    """Raised when the Bot API does not accept a message."""

    def __init__(
        self,
        message: str,
        *,
        error_code: int | None = None,
        description: str | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.description = description
        self.retry_after = retry_after


class TelegramClient:
    """Telegram Bot API client for sending messages.

    Each call makes exactly one HTTP request. Failures are raised as
    DeliveryError; retrying and rate limiting are left to the caller.
    """

    def __init__(
        self,
        bot_token: str,
        *,
        timeout: float = 10.0,
    ) -> None:
        """Initialize Telegram client.

        Args:
            bot_token: Telegram bot token.
            timeout: HTTP request timeout in seconds.
        """
        self.bot_token = bot_token
        self.timeout = timeout
        self.name = "telegram"

        self._api_url = TELEGRAM_API_BASE.format(token=bot_token)

    async def send_message(
        self,
        chat_id: str,
        text: str,
        *,
        parse_mode: str = "HTML",
        message_thread_id: int | None = None,
    ) -> None:
        """Send a text message to a chat.

        Args:
            chat_id: Target chat/channel ID.
            text: Message text.
            parse_mode: Bot API parse mode for the text.
            message_thread_id: Forum thread to post into.

        Raises:
            DeliveryError: If the request fails or the API rejects the message.
        """
        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
        }
        if message_thread_id is not None:
            payload["message_thread_id"] = message_thread_id

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self._api_url, json=payload)
                result = response.json()
        except httpx.TimeoutException as e:
            raise DeliveryError(f"Telegram API timeout after {self.timeout}s") from e
        except httpx.HTTPError as e:
            # str(e) may carry the request URL, which embeds the token
            raise DeliveryError(f"Telegram API request failed: {type(e).__name__}") from e
        except ValueError as e:
            raise DeliveryError("Telegram API returned an invalid response") from e

        if not isinstance(result, dict):
            raise DeliveryError("Telegram API returned an invalid response")

        if not result.get("ok"):
            error_code = result.get("error_code", 0)
            description = result.get("description", "Unknown error")
            retry_after = (result.get("parameters") or {}).get("retry_after")
            raise DeliveryError(
                f"Telegram API error: {error_code} - {description}",
                error_code=error_code,
                description=description,
                retry_after=retry_after,
            )

        logger.debug(f"Telegram message delivered to chat {chat_id}")
