"""Notification port — abstract interface for the host notification scheduler.

Core modules depend on this protocol, never on a specific scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class NotificationError(Exception):
    """Raised when the notification scheduler rejects an operation."""


@dataclass(frozen=True)
class PendingNotification:
    """A notification request that has been scheduled but not yet delivered."""

    identifier: str
    fire_at: datetime
    title: str = ""
    body: str = ""


class NotificationSink(Protocol):
    """Abstract notification scheduler used by core modules."""

    async def get_pending(self) -> list[PendingNotification]: ...

    async def cancel(self, identifiers: list[str]) -> None: ...

    async def schedule(
        self, identifier: str, title: str, body: str, fire_at: datetime
    ) -> None: ...

    async def request_permission(self) -> bool: ...
