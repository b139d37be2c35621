"""Reminder planner — pure business logic.

Turns an event's start instant and reminder offsets into the reminders that
still lie in the future. Offsets whose firing time has already passed are
dropped, never fired late.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedReminder:
    """One reminder to schedule."""

    offset_minutes: int
    fire_at: datetime


def normalize_intervals(values: Iterable[int]) -> list[int]:
    """Return offsets de-duplicated, non-negative and sorted ascending."""
    return sorted({int(v) for v in values if int(v) >= 0})


def plan(
    start: datetime,
    offsets: Iterable[int],
    now: datetime,
) -> list[PlannedReminder]:
    """Plan the strictly-future reminders for an event starting at ``start``.

    Args:
        start: The event's resolved start instant.
        offsets: Minutes before start; negatives and duplicates are ignored.
        now: Reference instant; reminders firing at or before it are dropped.

    Returns:
        Reminders ordered by offset ascending.
    """
    planned: list[PlannedReminder] = []
    for offset in normalize_intervals(offsets):
        fire_at = start - timedelta(minutes=offset)
        if fire_at <= now:
            continue
        planned.append(PlannedReminder(offset_minutes=offset, fire_at=fire_at))

    logger.debug(
        "Planned %d reminder(s) for start %s", len(planned), start.isoformat(),
    )
    return planned
