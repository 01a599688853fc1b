"""Message validation logic (core domain).

A message in the watched channel is kept only when every URL-looking token
points at a permitted domain, every attachment has a permitted extension, and
the message is not bare text. Mentions exempt a message from the bare-text
check; empty text (attachment-only posts) and text made solely of permitted
links pass it as well.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, List
from urllib.parse import urlsplit

from core.config import Policy
from core.models import Attachment, MessageContext

URL_SCHEMES = frozenset({"http", "https", "ftp"})

_ILLEGAL_URI_CHARS = re.compile(r"[\s\x00-\x1f\x7f<>\"{}|\\^`]")
_BRACKETS = frozenset("[]")
_BROKEN_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class ValidationReport:
    """Counts behind a single verdict, kept for audit logging."""

    token_count: int
    url_count: int
    valid_url_count: int
    attachment_count: int
    valid_attachment_count: int
    has_mentions: bool
    content_is_empty: bool

    @property
    def all_urls_valid(self) -> bool:
        return self.url_count == self.valid_url_count

    @property
    def all_attachments_valid(self) -> bool:
        return self.attachment_count == self.valid_attachment_count

    @property
    def all_tokens_are_valid_urls(self) -> bool:
        return self.valid_url_count == self.token_count

    @property
    def valid(self) -> bool:
        return (
            self.all_urls_valid
            and self.all_attachments_valid
            and (self.has_mentions or self.content_is_empty or self.all_tokens_are_valid_urls)
        )


def tokenize(text: str) -> List[str]:
    """Split text on single spaces.

    Trailing empty tokens are dropped, but at least one token always remains,
    so empty text yields ``[""]``.
    """

    tokens = text.split(" ")
    while len(tokens) > 1 and tokens[-1] == "":
        tokens.pop()
    return tokens


def is_url(token: str) -> bool:
    """Return True if the token is a well-formed absolute URL.

    Never raises: anything that fails to parse is simply not a URL.
    """

    if not token or _ILLEGAL_URI_CHARS.search(token) or _BROKEN_ESCAPE.search(token):
        return False
    try:
        parts = urlsplit(token)
        # urlsplit is lenient about ports; reading the attribute validates it.
        parts.port
    except ValueError:
        return False
    # Brackets are only legal around an IPv6 host; a fragment holds one "#".
    if _BRACKETS.intersection(parts.path + parts.query + parts.fragment) or "#" in parts.fragment:
        return False
    return parts.scheme.lower() in URL_SCHEMES and bool(parts.hostname)


def is_permitted_url(token: str, policy: Policy) -> bool:
    """Return True if the token is a URL containing any permitted domain.

    Matching is a plain substring search over the whole token, so a permitted
    name anywhere in the path or query is enough.
    """

    if not is_url(token):
        return False
    return any(domain in token for domain in policy.valid_domain_names)


def count_permitted_attachments(attachments: Iterable[Attachment], policy: Policy) -> int:
    """Count attachments whose extension is in the permitted set."""

    return sum(1 for attachment in attachments if attachment.extension in policy.valid_file_extensions)


def inspect_message(message: MessageContext, policy: Policy) -> ValidationReport:
    """Compute every count the verdict depends on."""

    tokens = tokenize(message.text)
    return ValidationReport(
        token_count=len(tokens),
        url_count=sum(1 for token in tokens if is_url(token)),
        valid_url_count=sum(1 for token in tokens if is_permitted_url(token, policy)),
        attachment_count=len(message.attachments),
        valid_attachment_count=count_permitted_attachments(message.attachments, policy),
        has_mentions=bool(message.mentions or message.mentioned_members),
        content_is_empty=message.text == "",
    )


def evaluate(message: MessageContext, policy: Policy) -> bool:
    """Return True if the message may stay in the watched channel."""

    return inspect_message(message, policy).valid
