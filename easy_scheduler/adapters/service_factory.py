"""Service factory — wires the event service to its configured adapters."""

from __future__ import annotations

from easy_scheduler.adapters.local_notifier import LocalNotificationSink
from easy_scheduler.core.event_service import EventService
from easy_scheduler.core.lifecycle import LifecycleEngine
from easy_scheduler.core.notification_sync import NotificationSynchronizer
from easy_scheduler.data.db import EventDB


def create_event_service(
    db_path: str | None = None,
    sink: LocalNotificationSink | None = None,
) -> EventService:
    """Return an EventService backed by SQLite and the local notification sink.

    Args:
        db_path: Database file; defaults to DATABASE_PATH from settings.
        sink: Notification sink; defaults to a LocalNotificationSink on db_path.
    """
    store = EventDB(db_path=db_path)
    if sink is None:
        sink = LocalNotificationSink(db_path=db_path)

    synchronizer = NotificationSynchronizer(sink)
    engine = LifecycleEngine(store, synchronizer)
    return EventService(store, synchronizer, engine)
