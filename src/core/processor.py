"""Core message processing pipeline.

This module is integration-agnostic. It only relies on ports for auditing and
moderation, enabling other chat backends without changes here.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from core.config import Policy
from core.models import MessageContext
from core.ports import AuditPort, ModerationPort
from core.source_keys import chat_id_key
from core.validator import ValidationReport, inspect_message

LOGGER = logging.getLogger(__name__)

DELETE_REASON = "Not a link or media file"


class MessageProcessor:
    """Orchestrates channel filtering, validation, auditing, and deletion."""

    def __init__(
        self,
        policy: Policy,
        moderator: ModerationPort,
        audit: AuditPort,
        watched_sources: Iterable[str],
    ) -> None:
        self._policy = policy
        self._moderator = moderator
        self._audit = audit
        self._watched_sources = frozenset(watched_sources)

    def is_watched(self, context: MessageContext) -> bool:
        return (
            context.source_key in self._watched_sources
            or chat_id_key(context.chat_id) in self._watched_sources
        )

    async def handle(self, context: MessageContext) -> Optional[ValidationReport]:
        """Process one message context through the core pipeline.

        Returns the validation report, or None when the message belongs to a
        chat that is not watched.
        """

        if not self.is_watched(context):
            return None

        report = inspect_message(context, self._policy)
        self._audit.record(context, report)
        if not report.valid:
            await self._moderator.delete(context, DELETE_REASON)
            LOGGER.debug("Delete requested for message %s in %s", context.message_id, context.source_key)
        return report
