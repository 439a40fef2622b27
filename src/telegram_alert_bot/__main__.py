"""CLI entry point for Telegram Alert Bot.

Sends a single alert using configuration from the environment.

Usage:
    python -m telegram_alert_bot error "Nightly backup failed" --metadata '{"host": "db1"}'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from typing import Any, NoReturn

from pydantic import ValidationError

from telegram_alert_bot import __version__
from telegram_alert_bot.alerter.bot import TelegramAlertBot
from telegram_alert_bot.alerter.models import AlertLevel
from telegram_alert_bot.alerter.validation import ConfigError
from telegram_alert_bot.config import Settings, clear_settings_cache, get_settings

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

LEVEL_CHOICES = [level.value.lower() for level in AlertLevel]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="telegram-alert-bot",
        description="Send a project-tagged alert to a Telegram forum thread.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m telegram_alert_bot error "Backup failed"            Send an ERROR alert
  python -m telegram_alert_bot log "Deployed" --metadata '{"v": 3}'  Attach metadata
  python -m telegram_alert_bot warning "Disk 90%" --dry-run     Print instead of sending
  python -m telegram_alert_bot --config-check                  Validate config and exit
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "level",
        nargs="?",
        choices=LEVEL_CHOICES,
        help="Alert level",
    )

    parser.add_argument(
        "message",
        nargs="?",
        help="Alert message text",
    )

    parser.add_argument(
        "--metadata",
        default=None,
        help="JSON object attached to the alert",
    )

    parser.add_argument(
        "--config-check",
        action="store_true",
        help="Validate configuration and exit without sending",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level (default: from settings)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the formatted alert instead of sending it",
    )

    return parser


def configure_logging(level: str) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed" if level == "DEBUG" else "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        # httpx logs every request URL, which embeds the bot token
        "loggers": {
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
    }
    logging.config.dictConfig(config)


def print_config_summary(settings: Settings, bot: TelegramAlertBot) -> None:
    """Print a summary of the configuration.

    Args:
        settings: Application settings.
        bot: The bot built from the settings.
    """
    summary = settings.redacted_summary()
    print("Configuration:")
    print(f"  Bot Token: {summary['bot_token']}")
    print(f"  Chat ID: {summary['chat_id']}")
    print(f"  Thread ID: {summary['thread_id']}")
    print(f"  Project: {summary['project_name']} (#{bot.project_tag})")
    print(f"  Log Level: {summary['log_level']}")
    print(f"  Dry Run: {summary['dry_run']}")
    print()


def validate_config() -> Settings | None:
    """Validate and load configuration.

    Returns:
        Settings instance if valid, None if invalid.
    """
    try:
        # Clear cache to force reload
        clear_settings_cache()
        return get_settings()
    except ValidationError as e:
        print("Configuration validation failed:", file=sys.stderr)
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            msg = error["msg"]
            print(f"  {field}: {msg}", file=sys.stderr)
        return None


def build_bot(settings: Settings) -> TelegramAlertBot | None:
    """Build the alert bot from settings.

    Returns:
        The bot, or None if the configuration is rejected.
    """
    try:
        return (
            TelegramAlertBot.builder(settings.bot_token())
            .set_config(settings.bot_config())
            .build()
        )
    except ConfigError as e:
        print(f"Configuration validation failed: {e}", file=sys.stderr)
        return None


def parse_metadata(raw: str | None) -> dict[str, Any] | None:
    """Parse the --metadata option.

    Raises:
        ValueError: If the value is not a JSON object.
    """
    if raw is None:
        return None
    metadata = json.loads(raw)
    if not isinstance(metadata, dict):
        raise ValueError("metadata must be a JSON object")
    return metadata


async def run_alert(
    bot: TelegramAlertBot,
    level: AlertLevel,
    message: str,
    metadata: dict[str, Any] | None,
) -> int:
    """Send one alert.

    Returns:
        Exit code.
    """
    logger = logging.getLogger(__name__)
    try:
        await bot.send_alert(level, message, metadata)
    except (TypeError, ValueError) as e:
        logger.error(f"Could not format alert: {e}")
        return EXIT_ERROR
    logger.info(f"{level.value} alert dispatched for #{bot.project_tag}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.config_check and (args.level is None or args.message is None):
        parser.error("level and message are required unless --config-check is given")

    try:
        metadata = parse_metadata(args.metadata)
    except ValueError as e:
        parser.error(f"invalid --metadata: {e}")

    settings = validate_config()
    if settings is None:
        sys.exit(EXIT_CONFIG_ERROR)

    log_level = args.log_level or settings.log_level
    configure_logging(log_level)

    bot = build_bot(settings)
    if bot is None:
        sys.exit(EXIT_CONFIG_ERROR)

    if args.config_check:
        print("Configuration is valid!")
        print()
        print_config_summary(settings, bot)
        sys.exit(EXIT_SUCCESS)

    level = AlertLevel(args.level.upper())

    if args.dry_run or settings.dry_run:
        print(bot.format_message(level, args.message, metadata))
        sys.exit(EXIT_SUCCESS)

    try:
        exit_code = asyncio.run(run_alert(bot, level, args.message, metadata))
    except KeyboardInterrupt:
        exit_code = EXIT_INTERRUPTED
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
