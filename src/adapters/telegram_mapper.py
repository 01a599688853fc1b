"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Any, Tuple

from telethon.helpers import add_surrogate, del_surrogate
from telethon.tl.custom import Message
from telethon.tl.types import (
    InputMessageEntityMentionName,
    MessageEntityMention,
    MessageEntityMentionName,
)

from core.models import Attachment, MessageContext
from core.source_keys import chat_id_key


def source_key_from_message(message: Message) -> str:
    """Normalize a source key using a single rule enforced across the app."""

    chat = getattr(message, "chat", None)
    username = getattr(chat, "username", None)

    if isinstance(username, str) and username:
        return f"@{username.lower()}"

    # Fallback: always stable and universal
    return chat_id_key(message.chat_id)


def author_label(message: Message) -> str:
    """Return a readable label for whoever sent the message."""

    sender: Any = getattr(message, "sender", None)
    username = getattr(sender, "username", None)
    if username:
        return f"@{username}"
    title = getattr(sender, "title", None)
    if title:
        return str(title)
    first = getattr(sender, "first_name", None)
    last = getattr(sender, "last_name", None)
    if first or last:
        return " ".join(part for part in [first, last] if part)
    return f"user_id:{getattr(message, 'sender_id', None)}"


def _attachments_from_message(message: Message) -> Tuple[Attachment, ...]:
    # Link previews expose their thumbnail through message.file as well, but
    # they are generated from the text, not attached by the sender.
    if getattr(message, "web_preview", None) is not None:
        return ()

    file = getattr(message, "file", None)
    if file is None:
        return ()

    name = getattr(file, "name", None)
    if not name:
        # Photos and some voice/video notes carry no file name.
        kind = "photo" if getattr(message, "photo", None) is not None else "file"
        name = f"{kind}{getattr(file, 'ext', None) or ''}"
    return (Attachment.from_file_name(name),)


def _mentions_from_message(message: Message) -> Tuple[Tuple[str, ...], Tuple[int, ...]]:
    entities = getattr(message, "entities", None) or []
    # Entity offsets are counted in UTF-16 code units.
    text = add_surrogate(message.raw_text or "")

    mentions = []
    members = []
    for entity in entities:
        if isinstance(entity, MessageEntityMention):
            mentions.append(del_surrogate(text[entity.offset : entity.offset + entity.length]))
        elif isinstance(entity, MessageEntityMentionName):
            members.append(entity.user_id)
        elif isinstance(entity, InputMessageEntityMentionName):
            members.append(getattr(entity.user_id, "user_id", entity.user_id))
    return tuple(mentions), tuple(members)


def build_context(message: Message) -> MessageContext:
    """Build a core MessageContext from a Telethon Message."""

    mentions, mentioned_members = _mentions_from_message(message)
    return MessageContext(
        source_key=source_key_from_message(message),
        chat_id=message.chat_id,
        message_id=message.id,
        author=author_label(message),
        date=message.date,
        text=message.raw_text or "",
        attachments=_attachments_from_message(message),
        mentions=mentions,
        mentioned_members=mentioned_members,
    )
