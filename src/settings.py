"""Configuration loading for memeguard.

All user-editable settings (watched channel, permitted extensions and
domains, logging) live in a single JSON file for quick edits without touching
Python. Secrets stay in the environment; see client.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from typing import Any, FrozenSet, Optional

from core.config import Policy
from core.source_keys import expand_source_key_variants, normalize_source_key

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Default location of the config file, next to the project root.
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")


class ConfigError(RuntimeError):
    """Raised when config.json is present but unusable."""


@dataclass(frozen=True)
class Settings:
    """Everything the app reads from config.json, resolved once at startup."""

    channel: str
    watched_sources: FrozenSet[str]
    policy: Policy
    logging: dict[str, Any] = field(default_factory=dict)


def _load_json_config(path: str) -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Config file is not valid JSON: {path} ({exc})") from exc

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")
    return data


def _string_list(config: dict, key: str) -> list[str]:
    values = config.get(key)
    if not isinstance(values, list):
        raise ConfigError(f"'{key}' must be a list of strings")
    for value in values:
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"'{key}' entries must be non-empty strings")
    return [value.strip() for value in values]


def _normalize_extension(value: str) -> str:
    # Accept ".png" and "PNG" alike; attachments are compared lower-cased.
    return value.lstrip(".").lower()


def build_policy(config: dict) -> Policy:
    """Build the immutable Policy from the raw config mapping."""

    extensions = _string_list(config, "valid_file_extensions")
    domains = _string_list(config, "valid_domain_names")
    return Policy(
        valid_file_extensions=frozenset(_normalize_extension(ext) for ext in extensions),
        valid_domain_names=tuple(dict.fromkeys(domains)),
    )


def load_settings(path: Optional[str] = None) -> Settings:
    """Read and validate the config file.

    Raises FileNotFoundError when the file is missing and ConfigError when a
    required value is missing or malformed.
    """

    config = _load_json_config(path or CONFIG_PATH)

    raw_channel = config.get("channel")
    if not isinstance(raw_channel, str) or not raw_channel.strip():
        raise ConfigError("'channel' is required (use @username or chat_id:<id>)")
    try:
        channel = normalize_source_key(raw_channel)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    logging_config = config.get("logging", {}) or {}
    if not isinstance(logging_config, dict):
        raise ConfigError("'logging' must be an object")

    return Settings(
        channel=channel,
        watched_sources=expand_source_key_variants(channel),
        policy=build_policy(config),
        logging=logging_config,
    )
