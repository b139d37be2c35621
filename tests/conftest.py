"""Shared test fixtures and configuration.

Sets up environment variables before any easy_scheduler imports, and provides
common fixtures backed by a temp SQLite file.
"""

import os

# Patch env vars BEFORE any easy_scheduler imports
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "true")
os.environ.setdefault("DEFAULT_REMINDER_INTERVALS", "")

import pytest


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_events.db")


@pytest.fixture
def event_db(tmp_db_path):
    """Return an EventDB instance backed by a temp file."""
    from easy_scheduler.data.db import EventDB
    return EventDB(db_path=tmp_db_path)


@pytest.fixture
def notification_sink(tmp_db_path):
    """Return a LocalNotificationSink with permission granted."""
    from easy_scheduler.adapters.local_notifier import LocalNotificationSink
    return LocalNotificationSink(db_path=tmp_db_path, permission_granted=True)


@pytest.fixture
def synchronizer(notification_sink):
    from easy_scheduler.core.notification_sync import NotificationSynchronizer
    return NotificationSynchronizer(notification_sink)


@pytest.fixture
def engine(event_db, synchronizer):
    from easy_scheduler.core.lifecycle import LifecycleEngine
    return LifecycleEngine(event_db, synchronizer)


@pytest.fixture
def event_service(event_db, synchronizer, engine):
    from easy_scheduler.core.event_service import EventService
    return EventService(event_db, synchronizer, engine)
