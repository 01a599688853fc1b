"""Helpers for working with memeguard source keys.

A source key names a chat either by public username (``@name``) or by its
numeric id (``chat_id:<id>``).
"""

from __future__ import annotations

USERNAME_PREFIX = "@"
CHAT_ID_PREFIX = "chat_id:"


def chat_id_key(chat_id: int) -> str:
    return f"{CHAT_ID_PREFIX}{chat_id}"


def normalize_source_key(raw_value: str) -> str:
    """Return the canonical form of a configured source key.

    Raises ValueError when the value is neither ``@username`` nor
    ``chat_id:<int>``.
    """

    raw_value = raw_value.strip()
    if raw_value.startswith(USERNAME_PREFIX):
        username = raw_value[1:]
        if not username or not username.replace("_", "a").isalnum():
            raise ValueError(f"Invalid username in source key: {raw_value!r}")
        return f"{USERNAME_PREFIX}{username.lower()}"

    if raw_value.startswith(CHAT_ID_PREFIX):
        chat_value = raw_value[len(CHAT_ID_PREFIX) :]
        try:
            return chat_id_key(int(chat_value))
        except ValueError:
            raise ValueError(f"chat_id must be numeric: {raw_value!r}") from None

    raise ValueError(f"Source key must start with @ or chat_id: ({raw_value!r})")


def _expand_chat_id_variants(raw_chat_id: int) -> set[int]:
    """Return equivalent chat id variants (peer id, chat id, channel id)."""

    variants: set[int] = {raw_chat_id}
    if raw_chat_id < 0:
        raw_text = str(raw_chat_id)
        if raw_text.startswith("-100"):
            # Channel/supergroup peer id: -100<channel_id>
            channel_part = raw_text[4:]
            if channel_part.isdigit():
                variants.add(int(channel_part))
        else:
            variants.add(abs(raw_chat_id))
        return variants

    # raw_chat_id is positive: add PeerChat and PeerChannel-style ids.
    variants.add(-raw_chat_id)
    variants.add(-1000000000000 - raw_chat_id)
    return variants


def expand_source_key_variants(source_key: str) -> frozenset[str]:
    """Expand a source key to include equivalent chat_id variants."""

    if not source_key.startswith(CHAT_ID_PREFIX):
        return frozenset({source_key})

    try:
        raw_chat_id = int(source_key[len(CHAT_ID_PREFIX) :])
    except ValueError:
        return frozenset({source_key})

    return frozenset(chat_id_key(variant) for variant in _expand_chat_id_variants(raw_chat_id))
