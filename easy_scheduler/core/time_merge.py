"""Time merge — combine a calendar day and a time-of-day into one instant.

Instants are naive datetimes in the device's local time. There is no timezone
model: if the device timezone changes between creating an event and
evaluating it, the resolved instant shifts with the wall clock.

No I/O: this module only transforms data.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from easy_scheduler.data.models import Event


def merge(day: date | datetime | None, time_of_day: time | datetime | None) -> datetime | None:
    """Return the instant at ``time_of_day`` on ``day``, or None if either is missing.

    Only year/month/day are taken from ``day`` and only hour/minute/second
    from ``time_of_day``; a datetime passed for either is reduced accordingly.
    """
    if day is None or time_of_day is None:
        return None

    if isinstance(day, datetime):
        day = day.date()
    if isinstance(time_of_day, datetime):
        time_of_day = time_of_day.time()

    return datetime(
        day.year, day.month, day.day,
        time_of_day.hour, time_of_day.minute, time_of_day.second,
    )


def start_instant(event: Event) -> datetime | None:
    return merge(event.event_date, event.start_time)


def end_instant(event: Event) -> datetime | None:
    """The explicit end instant, or None when the event has no end time."""
    if not event.use_end_time:
        return None
    return merge(event.event_date, event.end_time)


def effective_end(event: Event) -> datetime | None:
    """The instant after which the event is over.

    The explicit end when it is resolvable and strictly after the start,
    otherwise the start itself. None when the start cannot be resolved.
    """
    start = start_instant(event)
    if start is None:
        return None

    end = end_instant(event)
    if end is not None and end > start:
        return end
    return start
