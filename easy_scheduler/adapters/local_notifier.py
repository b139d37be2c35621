"""Local notification scheduler — implements NotificationSink.

Keeps pending notification requests in SQLite, the way the host OS keeps its
own queue. Uses the sqlite3 module (sync) wrapped with asyncio.to_thread for
async compatibility. The host's delivery side drains due requests with
pop_due().
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from easy_scheduler.ports.notification_port import NotificationError, PendingNotification

logger = logging.getLogger(__name__)


class LocalNotificationSink:
    """SQLite implementation of NotificationSink."""

    def __init__(
        self,
        db_path: str | None = None,
        permission_granted: bool | None = None,
    ) -> None:
        if db_path is None or permission_granted is None:
            from easy_scheduler.config import settings
            if db_path is None:
                db_path = settings.DATABASE_PATH
            if permission_granted is None:
                permission_granted = settings.NOTIFICATIONS_ENABLED

        self._db_path = db_path
        self._permission_granted = permission_granted
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS pending_notifications (
                    identifier TEXT PRIMARY KEY,
                    title      TEXT NOT NULL,
                    body       TEXT NOT NULL,
                    fire_at    TEXT NOT NULL
                )
            """)
        logger.debug("Pending notifications table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_pending(row: sqlite3.Row) -> PendingNotification:
        return PendingNotification(
            identifier=row["identifier"],
            fire_at=datetime.fromisoformat(row["fire_at"]),
            title=row["title"],
            body=row["body"],
        )

    # ------------------------------------------------------------------
    # Sync helpers (run in a worker thread)
    # ------------------------------------------------------------------

    def _select_pending(self) -> list[PendingNotification]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM pending_notifications ORDER BY fire_at, identifier"
            ).fetchall()
        return [self._row_to_pending(r) for r in rows]

    def _delete(self, identifiers: list[str]) -> None:
        with self._connect() as conn:
            conn.executemany(
                "DELETE FROM pending_notifications WHERE identifier = ?",
                [(i,) for i in identifiers],
            )

    def _upsert(self, identifier: str, title: str, body: str, fire_at: datetime) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO pending_notifications
                    (identifier, title, body, fire_at)
                VALUES (?, ?, ?, ?)
                """,
                (identifier, title, body, fire_at.isoformat()),
            )

    def _take_due(self, now: datetime) -> list[PendingNotification]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM pending_notifications WHERE fire_at <= ? "
                "ORDER BY fire_at, identifier",
                (now.isoformat(),),
            ).fetchall()
            conn.executemany(
                "DELETE FROM pending_notifications WHERE identifier = ?",
                [(r["identifier"],) for r in rows],
            )
        return [self._row_to_pending(r) for r in rows]

    # ------------------------------------------------------------------
    # NotificationSink
    # ------------------------------------------------------------------

    async def request_permission(self) -> bool:
        return self._permission_granted

    async def get_pending(self) -> list[PendingNotification]:
        try:
            return await asyncio.to_thread(self._select_pending)
        except sqlite3.Error as exc:
            logger.error("Notification store error (get_pending): %s", exc)
            raise NotificationError(f"Failed to list pending notifications: {exc}") from exc

    async def cancel(self, identifiers: Iterable[str]) -> None:
        identifiers = list(identifiers)
        if not identifiers:
            return
        try:
            await asyncio.to_thread(self._delete, identifiers)
        except sqlite3.Error as exc:
            logger.error("Notification store error (cancel): %s", exc)
            raise NotificationError(f"Failed to cancel notifications: {exc}") from exc
        logger.debug("Cancelled %d notification(s)", len(identifiers))

    async def schedule(
        self, identifier: str, title: str, body: str, fire_at: datetime
    ) -> None:
        # Triggers have minute resolution
        fire_at = fire_at.replace(second=0, microsecond=0)
        try:
            await asyncio.to_thread(self._upsert, identifier, title, body, fire_at)
        except sqlite3.Error as exc:
            logger.error("Notification store error (schedule): %s", exc)
            raise NotificationError(f"Failed to schedule notification: {exc}") from exc
        logger.debug("Scheduled %s at %s", identifier, fire_at.isoformat())

    # ------------------------------------------------------------------
    # Delivery side
    # ------------------------------------------------------------------

    async def pop_due(self, now: datetime | None = None) -> list[PendingNotification]:
        """Remove and return every request whose trigger time has arrived."""
        if now is None:
            now = datetime.now()
        try:
            due = await asyncio.to_thread(self._take_due, now)
        except sqlite3.Error as exc:
            logger.error("Notification store error (pop_due): %s", exc)
            raise NotificationError(f"Failed to collect due notifications: {exc}") from exc
        if due:
            logger.info("Delivering %d due notification(s)", len(due))
        return due
