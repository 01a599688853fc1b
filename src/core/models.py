"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


def extension_from_name(file_name: str) -> Optional[str]:
    """Return the lower-cased text after the last dot, or None."""

    _, dot, extension = file_name.rpartition(".")
    if not dot:
        return None
    return extension.lower()


@dataclass(frozen=True)
class Attachment:
    """A single file attached to a message."""

    file_name: str
    extension: Optional[str]

    @classmethod
    def from_file_name(cls, file_name: str) -> "Attachment":
        return cls(file_name=file_name, extension=extension_from_name(file_name))


@dataclass(frozen=True)
class MessageContext:
    """Minimal message context used by the core processing pipeline."""

    source_key: str
    chat_id: int
    message_id: int
    author: str
    date: datetime
    text: str
    attachments: Tuple[Attachment, ...] = ()
    mentions: Tuple[str, ...] = ()
    mentioned_members: Tuple[int, ...] = ()
