"""Alert message formatter for Telegram HTML delivery.

This module turns an AlertRequest into a single HTML text block tagged
with the alert level and the project tag, ready for the Bot API
``parse_mode="HTML"``.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, assert_never

from telegram_alert_bot.alerter.models import AlertLevel

if TYPE_CHECKING:
    from datetime import datetime

    from telegram_alert_bot.alerter.models import AlertRequest

# Project tag rules
PROJECT_TAG_MAX_LENGTH = 32
UNNAMED_PROJECT_TAG = "unnamed_project"
NUMERIC_TAG_PREFIX = "project_"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
METADATA_INDENT = 2

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")

_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)


def derive_project_tag(project_name: str) -> str:
    """Derive a hashtag-safe project tag from a project name.

    The result only contains ``[a-z0-9_]``, is never empty and is at most
    PROJECT_TAG_MAX_LENGTH characters long. Truncation happens last, so the
    tag may end with an underscore.

    Example:
        >>> derive_project_tag("123 Cool Project!!")
        'project_123_cool_project'
    """
    tag = _NON_ALNUM_RUN.sub("_", project_name.strip().lower()).strip("_")

    if not tag:
        tag = UNNAMED_PROJECT_TAG
    elif tag[0].isdigit():
        tag = NUMERIC_TAG_PREFIX + tag

    return tag[:PROJECT_TAG_MAX_LENGTH]


def get_emoji(level: AlertLevel) -> str:
    """Get the emoji shown in the alert header for a level."""
    match level:
        case AlertLevel.ERROR:
            return "🚨"
        case AlertLevel.WARNING:
            return "⚠️"
        case AlertLevel.LOG:
            return "ℹ️"
        case _:
            assert_never(level)


def escape_html(text: str) -> str:
    """Escape the characters Telegram's HTML parse mode treats as markup."""
    return text.translate(_HTML_ESCAPES)


def format_timestamp(timestamp: datetime) -> str:
    """Format a timestamp as ``YYYY-MM-DD HH:MM:SS``."""
    return timestamp.strftime(TIMESTAMP_FORMAT)


def format_metadata(metadata: object) -> str:
    """Serialize metadata as indented JSON.

    Raises:
        TypeError: If a value is not JSON serializable.
        ValueError: If the metadata contains a circular reference.
    """
    return json.dumps(metadata, indent=METADATA_INDENT, ensure_ascii=False)


def format_alert(request: AlertRequest, *, project_tag: str, timestamp: datetime) -> str:
    """Format an alert request into a Telegram HTML message.

    Args:
        request: The alert to format.
        project_tag: Tag derived from the bot's project name.
        timestamp: Time to show in the header.

    Returns:
        The message text, sections separated by a blank line.
    """
    level = request.level.value
    emoji = get_emoji(request.level)

    parts = [
        f"#{level.lower()} #{project_tag}",
        f"<b>{emoji} {escape_html(level)} - {escape_html(format_timestamp(timestamp))}</b>",
        f"<b>Message:</b>\n<pre>{escape_html(request.message)}</pre>",
    ]

    if request.metadata:
        metadata_str = escape_html(format_metadata(dict(request.metadata)))
        parts.append(f"<b>Metadata:</b>\n<pre>{metadata_str}</pre>")

    return "\n\n".join(parts)
