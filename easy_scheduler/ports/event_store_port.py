"""Event store port — abstract interface for event persistence.

Core modules depend on this protocol, never on a specific storage engine.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from easy_scheduler.data.models import Event


class EventStoreError(Exception):
    """Raised when any event store operation fails."""


class EventStorePort(Protocol):
    """Abstract event store used by core modules."""

    def create(self, event: Event) -> Event: ...

    def get(self, event_id: str) -> Event | None: ...

    def update(self, event: Event) -> None: ...

    def delete(self, event_id: str) -> bool: ...

    def query_active(self) -> list[Event]: ...

    def query_archived(self) -> list[Event]: ...

    def query_for_day(self, day: date) -> list[Event]: ...

    def archive(self, event_id: str) -> bool: ...

    def spawn_and_archive(self, new_event: Event, archived_id: str) -> bool: ...
