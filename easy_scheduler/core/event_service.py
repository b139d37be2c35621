"""
Easy Scheduler — UI-Agnostic Event Service.

Service layer the screens call: add/edit/delete events, edit reminders, list
views, and the foreground lifecycle pass. Every write is persisted first and
only then reflected in the notification scheduler; notification failures are
logged and never surface to the UI.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from easy_scheduler.core.reminder_planner import normalize_intervals
from easy_scheduler.core.time_merge import end_instant, start_instant
from easy_scheduler.data.models import Event
from easy_scheduler.ports.notification_port import NotificationError

if TYPE_CHECKING:
    from easy_scheduler.core.lifecycle import LifecycleEngine, TickReport
    from easy_scheduler.core.notification_sync import NotificationSynchronizer
    from easy_scheduler.ports.event_store_port import EventStorePort

logger = logging.getLogger(__name__)


class EventValidationError(ValueError):
    """Raised when a new or edited event cannot be saved as entered."""


def validate_new_event(event: Event, now: datetime | None = None) -> None:
    """Check the add-event form rules.

    The title must not be blank, the start must lie in the future, and an
    end time, when used, must be after the start.
    """
    if now is None:
        now = datetime.now()

    if not event.title.strip():
        raise EventValidationError("Please enter a title for the event.")

    start = start_instant(event)
    if start is None or start <= now:
        raise EventValidationError("The event must start in the future.")

    if event.use_end_time:
        end = end_instant(event)
        if end is None or end <= start:
            raise EventValidationError("End time must be after the start time.")


class EventService:
    """Orchestrates the event store, the notification synchronizer and the lifecycle engine."""

    def __init__(
        self,
        store: EventStorePort,
        synchronizer: NotificationSynchronizer,
        engine: LifecycleEngine,
    ) -> None:
        self._store = store
        self._sync = synchronizer
        self._engine = engine

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def draft_event(self, now: datetime | None = None) -> Event:
        """Blank event for the add form: starts now, ends an hour later, default reminders."""
        from easy_scheduler.config import settings

        if now is None:
            now = datetime.now()
        start = now.replace(second=0, microsecond=0)
        return Event(
            title="",
            event_date=start.date(),
            start_time=start.time(),
            end_time=(start + timedelta(hours=1)).time(),
            use_end_time=False,
            reminder_intervals=list(settings.DEFAULT_REMINDER_INTERVALS),
        )

    async def add_event(self, event: Event, now: datetime | None = None) -> Event:
        """Validate, persist and schedule reminders for a new event."""
        validate_new_event(event, now)

        event.title = event.title.strip()
        event.reminder_intervals = normalize_intervals(event.reminder_intervals)
        event.is_archived = False
        if not event.use_end_time:
            event.end_time = None

        created = self._store.create(event)
        await self._resync(created, now)
        return created

    async def update_event(self, event: Event, now: datetime | None = None) -> None:
        """Persist an edit, then re-sync the event's reminders."""
        self._store.update(event)
        await self._resync(event, now)

    async def update_reminders(
        self,
        event_id: str,
        intervals: list[int],
        now: datetime | None = None,
    ) -> Event:
        """Replace an event's reminder offsets and reschedule its notifications."""
        event = self._store.get(event_id)
        if event is None:
            raise ValueError(f"Event {event_id} not found")

        event.reminder_intervals = normalize_intervals(intervals)
        self._store.update(event)
        await self._resync(event, now)
        return event

    async def delete_event(self, event_id: str) -> bool:
        """Delete an event and cancel its pending notifications."""
        deleted = self._store.delete(event_id)
        try:
            await self._sync.purge(event_id)
        except NotificationError as exc:
            logger.error("Failed to purge notifications for %s: %s", event_id, exc)
        return deleted

    async def _resync(self, event: Event, now: datetime | None) -> None:
        try:
            await self._sync.sync_event(event, now)
        except NotificationError as exc:
            logger.error("Failed to schedule notifications for %s: %s", event.id, exc)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_active(self) -> list[Event]:
        return self._store.query_active()

    def list_archived(self) -> list[Event]:
        return self._store.query_archived()

    def events_for_day(self, day: date) -> list[Event]:
        """Active events on one calendar day, for the day timeline."""
        return self._store.query_for_day(day)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def on_foreground(self, now: datetime | None = None) -> TickReport:
        """Archive finished events and continue repeating ones."""
        return await self._engine.tick(now)
