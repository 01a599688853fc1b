"""Verdict audit adapter.

Writes one log record per evaluated message so moderators can see what was
kept and what was removed.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.models import MessageContext
from core.validator import ValidationReport


def format_attachments(context: MessageContext) -> str:
    return ", ".join(attachment.file_name for attachment in context.attachments)


def format_verdict(context: MessageContext, report: ValidationReport) -> str:
    """Return the multi-line audit entry for a verdict."""

    headline = "Message permitted from" if report.valid else "Deleting message from"
    return (
        f"{headline} {context.author}\n"
        f"\tcontent: \"{context.text}\"\n"
        f"\tattachments: {format_attachments(context)}"
    )


def format_counts(report: ValidationReport) -> str:
    return (
        f"tokens={report.token_count} urls={report.valid_url_count}/{report.url_count} "
        f"attachments={report.valid_attachment_count}/{report.attachment_count} "
        f"mentions={report.has_mentions} empty={report.content_is_empty}"
    )


class LoggingAuditLog:
    """Audit adapter backed by the standard logging module."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def record(self, context: MessageContext, report: ValidationReport) -> None:
        self._logger.info("%s", format_verdict(context, report))
        self._logger.debug(
            "Verdict counts for message %s in %s: %s",
            context.message_id,
            context.source_key,
            format_counts(report),
        )
