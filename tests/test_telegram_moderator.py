from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from adapters.telegram_moderator import TelegramModerator
from core.models import MessageContext


class FakeClient:
    def __init__(self) -> None:
        self.calls = []

    async def delete_messages(self, entity, message_ids, revoke=True):
        self.calls.append((entity, message_ids, revoke))


def test_delete_revokes_for_everyone_and_logs_reason(caplog) -> None:
    client = FakeClient()
    context = MessageContext(
        source_key="@memes",
        chat_id=-100123,
        message_id=42,
        author="@alice",
        date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        text="hello",
    )

    with caplog.at_level(logging.INFO, logger="adapters.telegram_moderator"):
        asyncio.run(TelegramModerator(client).delete(context, "Not a link or media file"))

    assert client.calls == [(-100123, [42], True)]
    assert "Deleted message 42 in @memes (Not a link or media file)" in caplog.text
