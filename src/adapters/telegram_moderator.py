"""Telegram moderation adapter.

Deletes rejected messages through the bot's own client session.
"""

from __future__ import annotations

import logging

from core.models import MessageContext

LOGGER = logging.getLogger(__name__)


class TelegramModerator:
    """Moderation adapter that removes messages via Telethon."""

    def __init__(self, client) -> None:
        self._client = client

    async def delete(self, context: MessageContext, reason: str) -> None:
        """Delete the message for everyone in the chat.

        Telegram has no per-deletion audit reason, so the reason is logged
        here instead of being sent along with the request.
        """

        await self._client.delete_messages(context.chat_id, [context.message_id], revoke=True)
        LOGGER.info("Deleted message %s in %s (%s)", context.message_id, context.source_key, reason)
