"""Data models for the alerter module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


class AlertLevel(Enum):
    """Severity of an alert."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    LOG = "LOG"


@dataclass(frozen=True)
class BotConfig:
    """Destination and identity of an alert bot.

    Attributes:
        chat_id: Target Telegram chat ID.
        thread_id: Forum thread (topic) ID inside the chat.
        project_name: Human-readable project name, used to derive the tag.
    """

    chat_id: str
    thread_id: int
    project_name: str


@dataclass(frozen=True)
class AlertRequest:
    """A single alert to be formatted and sent."""

    level: AlertLevel
    message: str
    metadata: Mapping[str, Any] | None = None
