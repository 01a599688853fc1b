"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for moderation and audit adapters so that
the core can be reused with different chat backends.
"""

from __future__ import annotations

from typing import Protocol

from core.models import MessageContext
from core.validator import ValidationReport


class ModerationPort(Protocol):
    """Moderation operations required by the core pipeline."""

    async def delete(self, context: MessageContext, reason: str) -> None:
        ...


class AuditPort(Protocol):
    """Verdict recording required by the core pipeline."""

    def record(self, context: MessageContext, report: ValidationReport) -> None:
        ...
