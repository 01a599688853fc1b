from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from core.config import Policy
from core.models import Attachment, MessageContext
from core.processor import DELETE_REASON, MessageProcessor
from core.source_keys import expand_source_key_variants
from core.validator import ValidationReport

POLICY = Policy(
    valid_file_extensions=frozenset({"png", "jpg"}),
    valid_domain_names=("youtube.com",),
)


class FakeModerator:
    def __init__(self, calls: list) -> None:
        self._calls = calls
        self.deleted: list[tuple[MessageContext, str]] = []

    async def delete(self, context: MessageContext, reason: str) -> None:
        self._calls.append("delete")
        self.deleted.append((context, reason))


class FakeAudit:
    def __init__(self, calls: list) -> None:
        self._calls = calls
        self.records: list[tuple[MessageContext, ValidationReport]] = []

    def record(self, context: MessageContext, report: ValidationReport) -> None:
        self._calls.append("audit")
        self.records.append((context, report))


def _make_context(
    *,
    text: str,
    source_key: str = "@memes",
    chat_id: int = -1001234,
    attachments: tuple[str, ...] = (),
) -> MessageContext:
    return MessageContext(
        source_key=source_key,
        chat_id=chat_id,
        message_id=7,
        author="@alice",
        date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        text=text,
        attachments=tuple(Attachment.from_file_name(name) for name in attachments),
    )


def _make_processor(watched: str = "@memes"):
    calls: list[str] = []
    moderator = FakeModerator(calls)
    audit = FakeAudit(calls)
    processor = MessageProcessor(
        policy=POLICY,
        moderator=moderator,
        audit=audit,
        watched_sources=expand_source_key_variants(watched),
    )
    return processor, moderator, audit, calls


def test_invalid_message_is_audited_then_deleted() -> None:
    processor, moderator, audit, calls = _make_processor()
    context = _make_context(text="hello friends")

    report = asyncio.run(processor.handle(context))

    assert report is not None and not report.valid
    assert calls == ["audit", "delete"]
    assert moderator.deleted == [(context, DELETE_REASON)]
    assert DELETE_REASON == "Not a link or media file"


def test_valid_message_is_only_audited() -> None:
    processor, moderator, audit, calls = _make_processor()
    context = _make_context(text="", attachments=("meme.png",))

    report = asyncio.run(processor.handle(context))

    assert report is not None and report.valid
    assert calls == ["audit"]
    assert not moderator.deleted
    assert audit.records[0][0] is context


def test_messages_from_other_chats_are_ignored() -> None:
    processor, moderator, audit, calls = _make_processor()
    context = _make_context(text="hello friends", source_key="@offtopic", chat_id=-100999)

    assert asyncio.run(processor.handle(context)) is None
    assert calls == []


def test_watched_chat_id_matches_marked_peer_id() -> None:
    processor, moderator, _, _ = _make_processor(watched="chat_id:1234")
    # Telethon reports channel 1234 as -1000000001234.
    context = _make_context(text="chit chat", source_key="@memes", chat_id=-1000000001234)

    asyncio.run(processor.handle(context))

    assert len(moderator.deleted) == 1


def test_watched_username_does_not_match_other_username() -> None:
    processor, _, _, _ = _make_processor(watched="@memes")
    assert processor.is_watched(_make_context(text="", source_key="@memes"))
    assert not processor.is_watched(_make_context(text="", source_key="@memes2", chat_id=1))
