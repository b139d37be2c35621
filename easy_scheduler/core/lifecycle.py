"""
Easy Scheduler — Lifecycle Engine.

Runs on app foreground. Every active event whose effective end has passed is
archived; a repeating one first spawns its next occurrence. The spawned record
and the archival commit in one store transaction, and the new occurrence's
reminders are scheduled only after that commit succeeds.

Per event:

    ACTIVE --(effective end <= now)--> ARCHIVED
    ACTIVE --(effective end <= now, repeats)--> spawn NEXT, then ARCHIVED

A failure while processing one event is logged and recorded; the rest of the
batch still runs. Once an event is committed, notification errors for it land
in `notify_failed` rather than `failed`, and cleaning the old id never blocks
scheduling the next occurrence. Each pass ends by cancelling any reminder still
pending for an archived event.

This module is storage- and scheduler-agnostic: it depends on the
EventStorePort protocol and the NotificationSynchronizer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from easy_scheduler.core.time_merge import effective_end, end_instant, start_instant
from easy_scheduler.data.models import Event, new_event_id
from easy_scheduler.ports.event_store_port import EventStoreError
from easy_scheduler.ports.notification_port import NotificationError

if TYPE_CHECKING:
    from easy_scheduler.core.notification_sync import NotificationSynchronizer
    from easy_scheduler.ports.event_store_port import EventStorePort

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """What one lifecycle pass did, by event id."""

    archived: list[str] = field(default_factory=list)
    spawned: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    notify_failed: list[str] = field(default_factory=list)  # committed, reminders not in sync


def next_occurrence(event: Event) -> Event | None:
    """Build the record that follows ``event`` in its series.

    Start (and end, when used) advance by ``repeat_frequency`` minutes; the
    calendar day follows the new start, so an occurrence pushed past midnight
    lands on the next day. Returns None when the event does not repeat or its
    start cannot be resolved.
    """
    if not event.repeats:
        return None

    start = start_instant(event)
    if start is None:
        return None

    step = timedelta(minutes=event.repeat_frequency)
    new_start = start + step

    new_end_time = None
    if event.use_end_time:
        old_end = end_instant(event)
        if old_end is not None:
            new_end_time = (old_end + step).time()

    return replace(
        event,
        id=new_event_id(),
        event_date=new_start.date(),
        start_time=new_start.time(),
        end_time=new_end_time,
        reminder_intervals=list(event.reminder_intervals),
        is_archived=False,
    )


class LifecycleEngine:
    """Archives finished events and continues repeating series."""

    def __init__(
        self,
        store: EventStorePort,
        synchronizer: NotificationSynchronizer,
    ) -> None:
        self._store = store
        self._sync = synchronizer

    async def tick(self, now: datetime | None = None) -> TickReport:
        """Evaluate every active event once against ``now``."""
        if now is None:
            now = datetime.now()

        report = TickReport()
        try:
            events = self._store.query_active()
        except EventStoreError as exc:
            logger.error("Lifecycle tick: failed to load active events: %s", exc)
            return report

        for event in events:
            try:
                await self._process(event, now, report)
            except (EventStoreError, NotificationError) as exc:
                logger.error("Lifecycle tick: event %s failed: %s", event.id, exc)
                report.failed.append(event.id)
            except Exception as exc:
                logger.error("Lifecycle tick: unexpected error on event %s: %s", event.id, exc)
                report.failed.append(event.id)

        await self._purge_archived_reminders()

        if report.archived or report.failed or report.notify_failed:
            logger.info(
                "Lifecycle tick: %d archived, %d spawned, %d skipped, %d failed, "
                "%d notification failure(s)",
                len(report.archived), len(report.spawned),
                len(report.skipped), len(report.failed), len(report.notify_failed),
            )
        return report

    async def _purge_archived_reminders(self) -> None:
        try:
            archived_ids = {e.id for e in self._store.query_archived()}
            await self._sync.purge_many(archived_ids)
        except (EventStoreError, NotificationError) as exc:
            logger.error("Lifecycle tick: reminder cleanup failed: %s", exc)

    async def _process(self, event: Event, now: datetime, report: TickReport) -> None:
        if event.is_archived:
            return

        ends_at = effective_end(event)
        if ends_at is None:
            logger.warning("Event %s has no resolvable start time, skipping", event.id)
            report.skipped.append(event.id)
            return

        if ends_at > now:
            return

        spawned = next_occurrence(event)
        if spawned is not None:
            committed = self._store.spawn_and_archive(spawned, event.id)
        else:
            committed = self._store.archive(event.id)

        if not committed:
            # Another pass archived it first; it owns the spawn.
            logger.info("Event %s was already archived, nothing to do", event.id)
            return

        report.archived.append(event.id)
        logger.info("Event %s archived", event.id)
        if spawned is not None:
            report.spawned.append(spawned.id)

        try:
            await self._sync.purge(event.id)
        except NotificationError as exc:
            logger.error("Failed to purge notifications for archived event %s: %s", event.id, exc)
            report.notify_failed.append(event.id)

        if spawned is not None:
            logger.info(
                "Event %s repeats every %d min: next occurrence %s on %s",
                event.id, event.repeat_frequency, spawned.id,
                spawned.event_date.isoformat(),
            )
            try:
                await self._sync.sync_event(spawned, now)
            except NotificationError as exc:
                logger.error("Failed to schedule notifications for %s: %s", spawned.id, exc)
                report.notify_failed.append(spawned.id)
