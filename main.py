"""
Easy Scheduler — Entry Point.

Foreground hook: `python main.py` runs one lifecycle pass (archive finished
events, continue repeating ones) and hands due reminders to the host.
"""

import asyncio
import logging

from easy_scheduler.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from easy_scheduler.adapters.local_notifier import LocalNotificationSink
from easy_scheduler.adapters.service_factory import create_event_service

logger = logging.getLogger("easy_scheduler")


async def main() -> None:
    sink = LocalNotificationSink()
    service = create_event_service(sink=sink)

    await service.on_foreground()

    for note in await sink.pop_due():
        logger.info("Reminder: %s: %s", note.title, note.body)


if __name__ == "__main__":
    asyncio.run(main())
