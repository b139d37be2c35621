"""
Easy Scheduler — Data Models.

Events persist in SQLite across launches. An Event is one concrete occurrence;
a repeating series is a chain of separate Event records, never one mutated row.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, time
from enum import IntEnum


class RepeatFrequency(IntEnum):
    """Canonical repeat frequencies in minutes. Any positive value is accepted."""

    HOURLY = 60
    DAILY = 1440
    WEEKLY = 10080
    BIWEEKLY = 20160
    MONTHLY = 43200  # 30 days

    @property
    def label(self) -> str:
        """Picker text for the repeat menu."""
        return _FREQUENCY_LABELS[self]


_FREQUENCY_LABELS = {
    RepeatFrequency.HOURLY: "1 Hour",
    RepeatFrequency.DAILY: "1 Day",
    RepeatFrequency.WEEKLY: "1 Week",
    RepeatFrequency.BIWEEKLY: "2 Weeks",
    RepeatFrequency.MONTHLY: "1 Month",
}


def new_event_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Event:
    """A scheduled event with reminders and optional recurrence."""

    title: str
    event_date: date                       # only year/month/day are meaningful
    start_time: time | None                # combined with event_date via time_merge
    end_time: time | None = None           # meaningful only when use_end_time
    use_end_time: bool = False
    notes: str = ""
    reminder_intervals: list[int] = field(default_factory=list)  # minutes before start
    is_archived: bool = False
    repeat_reminder: bool = False
    repeat_frequency: int = 0              # minutes; 0 = no recurrence
    id: str = field(default_factory=new_event_id)

    @property
    def repeats(self) -> bool:
        """True when archiving this event should spawn a next occurrence."""
        return self.repeat_reminder and self.repeat_frequency > 0
