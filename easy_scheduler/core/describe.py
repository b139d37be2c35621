"""Human-readable descriptions of events, durations and reminder offsets.

The single home for display defaults ("(No Title)") and the duration rule
used in notification bodies and reminder labels. `REMINDER_CHOICES`,
`interval_label` and `describe_event` feed the screens (pickers and list rows)
rather than the scheduling core.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from easy_scheduler.data.models import Event

NO_TITLE = "(No Title)"

# Reminder offsets offered when creating or editing an event
REMINDER_CHOICES = [1, 5, 10, 15, 30, 60, 120, 360, 720, 1440, 2880, 10080, 20160]

_WEEK = 10080
_DAY = 1440
_HOUR = 60


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_duration(minutes: int) -> str:
    """Format a minute count using the largest unit that divides it exactly.

    >>> format_duration(20160)
    '2 weeks'
    >>> format_duration(90)
    '1 hour 30 minutes'
    """
    if minutes < _HOUR:
        return _plural(minutes, "minute")
    if minutes % _WEEK == 0:
        return _plural(minutes // _WEEK, "week")
    if minutes % _DAY == 0:
        return _plural(minutes // _DAY, "day")
    if minutes % _HOUR == 0:
        return _plural(minutes // _HOUR, "hour")
    hours, mins = divmod(minutes, _HOUR)
    return f"{_plural(hours, 'hour')} {_plural(mins, 'minute')}"


def interval_label(minutes: int) -> str:
    """Label for a reminder offset toggle."""
    if minutes == 0:
        return "At time of event"
    return format_duration(minutes)


def display_title(title: str | None) -> str:
    if title is None or not title.strip():
        return NO_TITLE
    return title.strip()


def notification_body(title: str | None, offset_minutes: int) -> str:
    name = display_title(title)
    if offset_minutes == 0:
        return f"{name} starts now"
    return f"{name} starts in {format_duration(offset_minutes)}"


def describe_event(event: Event) -> str:
    """One-line summary for list views, e.g. "Standup · March 14, 2026 · 09:00–09:15"."""
    parts = [display_title(event.title), event.event_date.strftime("%B %d, %Y")]
    if event.start_time is not None:
        when = event.start_time.strftime("%H:%M")
        if event.use_end_time and event.end_time is not None:
            when += "–" + event.end_time.strftime("%H:%M")
        parts.append(when)
    return " · ".join(parts)
