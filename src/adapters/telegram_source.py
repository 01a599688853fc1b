"""Telegram inbound message source.

A single NewMessage handler maps events into the core model and defers all
filtering and decisions to the core processor.
"""

from __future__ import annotations

import logging

from telethon import events

from adapters.telegram_mapper import build_context
from core.processor import MessageProcessor

LOGGER = logging.getLogger(__name__)


class TelegramMessageSource:
    """Feeds incoming Telegram messages into a MessageProcessor."""

    def __init__(self, client, processor: MessageProcessor) -> None:
        self._client = client
        self._processor = processor

    async def on_message(self, event) -> None:
        try:
            # Loads the sender onto the message so the audit log can name it.
            await event.get_sender()
            context = build_context(event.message)
            await self._processor.handle(context)
        except Exception:
            LOGGER.exception("Error while processing message %s", getattr(event.message, "id", None))

    def register(self) -> None:
        """Attach the handler to the client; messages flow once it runs."""

        # incoming=True keeps the bot's own messages out of moderation.
        self._client.add_event_handler(self.on_message, events.NewMessage(incoming=True))
