"""
Easy Scheduler — Notification Synchronizer.

Reconciles the notifications scheduled for an event with a freshly planned set.
The policy is cancel-all-then-reschedule-all: every pending request for the
event is cancelled and the planned reminders are submitted again. Identifiers
are deterministic ("{event_id}-min-{offset}"), so the expected set can be
recomputed at any time without a separate index, and repeated syncs with the
same inputs leave the scheduler in the same state.

This module is scheduler-agnostic: it depends on the NotificationSink protocol.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from easy_scheduler.core.describe import display_title, notification_body
from easy_scheduler.core.reminder_planner import PlannedReminder, plan
from easy_scheduler.core.time_merge import start_instant

if TYPE_CHECKING:
    from easy_scheduler.data.models import Event
    from easy_scheduler.ports.notification_port import NotificationSink

logger = logging.getLogger(__name__)


def identifier_for(event_id: str, offset_minutes: int) -> str:
    return f"{event_id}-min-{offset_minutes}"


def identifier_prefix(event_id: str) -> str:
    """Prefix shared by every notification of one event.

    Includes the "-min-" separator so one event id can never match another
    id that merely starts with it.
    """
    return f"{event_id}-min-"


def event_id_of(identifier: str) -> str:
    """Event id encoded in a notification identifier, or "" if it has none."""
    return identifier.rpartition("-min-")[0]


def _truncate_to_minute(instant: datetime) -> datetime:
    return instant.replace(second=0, microsecond=0)


class NotificationSynchronizer:
    """Keeps the notification scheduler in step with event reminders."""

    def __init__(self, sink: NotificationSink) -> None:
        self._sink = sink

    async def sync(
        self,
        event_id: str,
        title: str | None,
        planned: Sequence[PlannedReminder],
    ) -> list[str]:
        """Replace the event's pending notifications with ``planned``.

        Returns the identifiers scheduled. When notification permission is
        not granted, nothing is cancelled or scheduled and an empty list is
        returned.
        """
        if not await self._sink.request_permission():
            logger.debug("Notification permission not granted, skipping sync for %s", event_id)
            return []

        await self._cancel_pending(event_id)

        name = display_title(title)
        scheduled: list[str] = []
        for reminder in planned:
            identifier = identifier_for(event_id, reminder.offset_minutes)
            await self._sink.schedule(
                identifier,
                name,
                notification_body(title, reminder.offset_minutes),
                _truncate_to_minute(reminder.fire_at),
            )
            scheduled.append(identifier)

        logger.info("Synced %d notification(s) for event %s", len(scheduled), event_id)
        return scheduled

    async def sync_event(self, event: Event, now: datetime | None = None) -> list[str]:
        """Plan and sync reminders for one event.

        Archived events and events whose start cannot be resolved have their
        notifications purged instead.
        """
        if now is None:
            now = datetime.now()

        start = start_instant(event)
        if start is None or event.is_archived:
            if start is None:
                logger.warning("Event %s has no resolvable start, purging reminders", event.id)
            await self.purge(event.id)
            return []

        planned = plan(start, event.reminder_intervals, now)
        return await self.sync(event.id, event.title, planned)

    async def purge(self, event_id: str) -> None:
        """Cancel every pending notification of an event."""
        cancelled = await self._cancel_pending(event_id)
        if cancelled:
            logger.info("Purged %d notification(s) for event %s", len(cancelled), event_id)

    async def _cancel_pending(self, event_id: str) -> list[str]:
        prefix = identifier_prefix(event_id)
        pending = await self._sink.get_pending()
        stale = [p.identifier for p in pending if p.identifier.startswith(prefix)]
        if stale:
            await self._sink.cancel(stale)
        return stale

    async def purge_many(self, event_ids: Iterable[str]) -> list[str]:
        """Cancel every pending notification belonging to any of ``event_ids``."""
        wanted = set(event_ids)
        if not wanted:
            return []
        pending = await self._sink.get_pending()
        stale = [p.identifier for p in pending if event_id_of(p.identifier) in wanted]
        if stale:
            await self._sink.cancel(stale)
            logger.info("Purged %d leftover notification(s)", len(stale))
        return stale
