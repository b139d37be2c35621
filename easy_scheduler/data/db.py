"""
Easy Scheduler — Event Database.

Events persist in SQLite across launches. Active and archived events share one
table, distinguished by the is_archived flag.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import date, time
from pathlib import Path

from easy_scheduler.core.reminder_planner import normalize_intervals
from easy_scheduler.data.models import Event
from easy_scheduler.ports.event_store_port import EventStoreError

logger = logging.getLogger(__name__)

_ORDER = "ORDER BY event_date, start_time"


def _time_to_str(value: time | None) -> str | None:
    return value.strftime("%H:%M:%S") if value is not None else None


def _str_to_time(value: str | None) -> time | None:
    if not value:
        return None
    return time.fromisoformat(value)


class EventDB:
    """SQLite-backed storage for events."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from easy_scheduler.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Create the events table if it doesn't exist, and migrate schema."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    id                 TEXT    PRIMARY KEY,
                    title              TEXT    NOT NULL DEFAULT '',
                    event_date         TEXT    NOT NULL,
                    start_time         TEXT,
                    end_time           TEXT,
                    use_end_time       INTEGER NOT NULL DEFAULT 0,
                    notes              TEXT    NOT NULL DEFAULT '',
                    reminder_intervals TEXT    NOT NULL DEFAULT '[]',
                    is_archived        INTEGER NOT NULL DEFAULT 0,
                    repeat_reminder    INTEGER NOT NULL DEFAULT 0,
                    repeat_frequency   INTEGER NOT NULL DEFAULT 0
                )
            """)
            # Migrate existing DBs: archival and recurrence came later
            existing_cols = {
                row[1] for row in conn.execute("PRAGMA table_info(events)").fetchall()
            }
            if "is_archived" not in existing_cols:
                conn.execute(
                    "ALTER TABLE events ADD COLUMN is_archived INTEGER NOT NULL DEFAULT 0"
                )
            if "repeat_reminder" not in existing_cols:
                conn.execute(
                    "ALTER TABLE events ADD COLUMN repeat_reminder INTEGER NOT NULL DEFAULT 0"
                )
            if "repeat_frequency" not in existing_cols:
                conn.execute(
                    "ALTER TABLE events ADD COLUMN repeat_frequency INTEGER NOT NULL DEFAULT 0"
                )
        logger.debug("Events table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_event(row: sqlite3.Row) -> Event:
        return Event(
            id=row["id"],
            title=row["title"],
            event_date=date.fromisoformat(row["event_date"]),
            start_time=_str_to_time(row["start_time"]),
            end_time=_str_to_time(row["end_time"]),
            use_end_time=bool(row["use_end_time"]),
            notes=row["notes"],
            reminder_intervals=json.loads(row["reminder_intervals"] or "[]"),
            is_archived=bool(row["is_archived"]),
            repeat_reminder=bool(row["repeat_reminder"]),
            repeat_frequency=row["repeat_frequency"],
        )

    @staticmethod
    def _event_params(event: Event) -> dict:
        return {
            "id": event.id,
            "title": event.title,
            "event_date": event.event_date.isoformat(),
            "start_time": _time_to_str(event.start_time),
            "end_time": _time_to_str(event.end_time) if event.use_end_time else None,
            "use_end_time": int(event.use_end_time),
            "notes": event.notes,
            "reminder_intervals": json.dumps(normalize_intervals(event.reminder_intervals)),
            "is_archived": int(event.is_archived),
            "repeat_reminder": int(event.repeat_reminder),
            "repeat_frequency": event.repeat_frequency,
        }

    @staticmethod
    def _insert(conn: sqlite3.Connection, event: Event) -> None:
        conn.execute(
            """
            INSERT INTO events
                (id, title, event_date, start_time, end_time, use_end_time,
                 notes, reminder_intervals, is_archived,
                 repeat_reminder, repeat_frequency)
            VALUES
                (:id, :title, :event_date, :start_time, :end_time, :use_end_time,
                 :notes, :reminder_intervals, :is_archived,
                 :repeat_reminder, :repeat_frequency)
            """,
            EventDB._event_params(event),
        )

    def create(self, event: Event) -> Event:
        """Insert a new event. Reminder intervals are stored normalized."""
        event.reminder_intervals = normalize_intervals(event.reminder_intervals)
        if not event.use_end_time:
            event.end_time = None
        try:
            with self._connect() as conn:
                self._insert(conn, event)
        except sqlite3.Error as exc:
            logger.error("Failed to create event '%s': %s", event.title, exc)
            raise EventStoreError(f"Failed to create event: {exc}") from exc

        logger.info("Event added: %s '%s' on %s", event.id, event.title, event.event_date)
        return event

    def get(self, event_id: str) -> Event | None:
        """Fetch a single event by ID."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM events WHERE id = ?", (event_id,)
                ).fetchone()
        except sqlite3.Error as exc:
            logger.error("Failed to fetch event %s: %s", event_id, exc)
            raise EventStoreError(f"Failed to fetch event: {exc}") from exc
        if row is None:
            return None
        return self._row_to_event(row)

    def update(self, event: Event) -> None:
        """Overwrite every field of an existing event."""
        event.reminder_intervals = normalize_intervals(event.reminder_intervals)
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    UPDATE events SET
                        title = :title, event_date = :event_date,
                        start_time = :start_time, end_time = :end_time,
                        use_end_time = :use_end_time, notes = :notes,
                        reminder_intervals = :reminder_intervals,
                        is_archived = :is_archived,
                        repeat_reminder = :repeat_reminder,
                        repeat_frequency = :repeat_frequency
                    WHERE id = :id
                    """,
                    self._event_params(event),
                )
        except sqlite3.Error as exc:
            logger.error("Failed to update event %s: %s", event.id, exc)
            raise EventStoreError(f"Failed to update event: {exc}") from exc

        if cursor.rowcount == 0:
            raise ValueError(f"Event {event.id} not found")
        logger.info("Event %s updated", event.id)

    def delete(self, event_id: str) -> bool:
        """Permanently delete an event by ID."""
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM events WHERE id = ?", (event_id,))
        except sqlite3.Error as exc:
            logger.error("Failed to delete event %s: %s", event_id, exc)
            raise EventStoreError(f"Failed to delete event: {exc}") from exc
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Event %s deleted", event_id)
        return deleted

    def query_active(self) -> list[Event]:
        """Return all non-archived events, earliest first."""
        return self._query(f"SELECT * FROM events WHERE is_archived = 0 {_ORDER}")

    def query_archived(self) -> list[Event]:
        """Return all archived events, earliest first."""
        return self._query(f"SELECT * FROM events WHERE is_archived = 1 {_ORDER}")

    def query_for_day(self, day: date) -> list[Event]:
        """Return the active events on one calendar day, ordered by start time."""
        return self._query(
            f"SELECT * FROM events WHERE is_archived = 0 AND event_date = ? {_ORDER}",
            (day.isoformat(),),
        )

    def _query(self, query: str, params: tuple = ()) -> list[Event]:
        try:
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            logger.error("Event query failed: %s", exc)
            raise EventStoreError(f"Failed to query events: {exc}") from exc
        return [self._row_to_event(r) for r in rows]

    def archive(self, event_id: str) -> bool:
        """Archive an active event. False if it is missing or already archived."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "UPDATE events SET is_archived = 1 WHERE id = ? AND is_archived = 0",
                    (event_id,),
                )
        except sqlite3.Error as exc:
            logger.error("Failed to archive event %s: %s", event_id, exc)
            raise EventStoreError(f"Failed to archive event: {exc}") from exc
        return cursor.rowcount > 0

    def spawn_and_archive(self, new_event: Event, archived_id: str) -> bool:
        """Insert the next occurrence and archive its predecessor in one transaction.

        The insert runs first. If the predecessor is missing or already
        archived, the transaction is rolled back and False is returned, so a
        series is never continued twice.
        """
        new_event.reminder_intervals = normalize_intervals(new_event.reminder_intervals)
        try:
            with self._connect() as conn:
                self._insert(conn, new_event)
                cursor = conn.execute(
                    "UPDATE events SET is_archived = 1 WHERE id = ? AND is_archived = 0",
                    (archived_id,),
                )
                if cursor.rowcount == 0:
                    conn.rollback()
                    logger.info(
                        "Event %s already archived, next occurrence discarded", archived_id,
                    )
                    return False
        except sqlite3.Error as exc:
            logger.error("Failed to continue series of event %s: %s", archived_id, exc)
            raise EventStoreError(f"Failed to spawn next occurrence: {exc}") from exc

        logger.info("Event %s archived, next occurrence %s added", archived_id, new_event.id)
        return True
