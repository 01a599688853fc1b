"""Application entry point for the memeguard channel moderator."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv

from adapters.audit_log import LoggingAuditLog, format_counts
from adapters.telegram_moderator import TelegramModerator
from adapters.telegram_source import TelegramMessageSource
from client import bot_token, build_client
from core.models import Attachment, MessageContext
from core.processor import DELETE_REASON, MessageProcessor
from core.validator import inspect_message
from settings import PROJECT_ROOT, ConfigError, Settings, load_settings

NAME = "MEMEGUARD"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", ["BOT_TOKEN", "API_HASH"]):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(config: dict) -> None:
    if not config.get("enabled", True):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/memeguard.log")
        if not os.path.isabs(path):
            path = os.path.join(PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _run(settings: Settings) -> None:
    _print_banner()
    _configure_logging(settings.logging)
    logger = logging.getLogger(__name__)

    logger.info("Starting memeguard")
    logger.info(
        "Watching %s with %s permitted extensions and %s permitted domains",
        settings.channel,
        len(settings.policy.valid_file_extensions),
        len(settings.policy.valid_domain_names),
    )

    token = bot_token()
    client = build_client()

    # The processor only sees ports, so Telethon stays confined to adapters.
    processor = MessageProcessor(
        policy=settings.policy,
        moderator=TelegramModerator(client),
        audit=LoggingAuditLog(),
        watched_sources=settings.watched_sources,
    )
    TelegramMessageSource(client, processor).register()

    # Explicit lifecycle management makes start/shutdown behavior obvious.
    client.start(bot_token=token)
    logger.info("Client connected. Listening for incoming messages...")
    client.run_until_disconnected()


def _check(settings: Settings, text: str, attachments: list[str], mentions: list[str]) -> bool:
    """Evaluate a message offline and print the verdict."""

    context = MessageContext(
        source_key=settings.channel,
        chat_id=0,
        message_id=0,
        author="check",
        date=datetime.now(timezone.utc),
        text=text,
        attachments=tuple(Attachment.from_file_name(name) for name in attachments),
        mentions=tuple(mentions),
    )
    report = inspect_message(context, settings.policy)
    verdict = "keep" if report.valid else f"delete ({DELETE_REASON})"
    print(f"{verdict}\n{format_counts(report)}")
    return report.valid


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="memeguard")
    parser.add_argument("--config", help="Path to config.json (defaults to the project root)")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the channel moderator")
    check_parser = subparsers.add_parser("check", help="Evaluate a message against the policy offline")
    check_parser.add_argument("text", nargs="?", default="", help="Message text")
    check_parser.add_argument(
        "-a", "--attachment", action="append", default=[], help="Attached file name (repeatable)"
    )
    check_parser.add_argument("-m", "--mention", action="append", default=[], help="Mentioned @username (repeatable)")

    args = parser.parse_args(argv)
    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ConfigError) as exc:
        parser.exit(1, f"memeguard: {exc}\n")

    if args.command == "check":
        valid = _check(settings, args.text, args.attachment, args.mention)
        parser.exit(0 if valid else 2)
    _run(settings)


if __name__ == "__main__":
    main()
