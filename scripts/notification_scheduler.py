# file: scripts/notification_scheduler.py

import asyncio
import logging
from datetime import datetime

from app.config import LOG_LEVEL, REMINDER_INTERVAL_SECONDS
from app.database.connection import init_db
from app.dependencies import get_reminder_scanner

logger = logging.getLogger(__name__)


async def run_scan_cycle():
    """Runs one reminder scan. Errors are logged so the loop keeps its cadence."""
    logger.info(f"--- [{datetime.now()}] STARTING NEW SCHEDULER CYCLE ---")
    try:
        result = await get_reminder_scanner().scan()
        logger.info(f"Reminder scan finished: {result}")
        return result
    except Exception as e:
        logger.error(f"An error occurred in the scheduler loop: {e}", exc_info=True)
        return None


async def main_scheduler_loop(interval_seconds: int = REMINDER_INTERVAL_SECONDS, max_cycles=None):
    """The main event loop for the scheduler daemon."""
    await init_db()
    cycles = 0
    while True:
        await run_scan_cycle()
        cycles += 1
        if max_cycles is not None and cycles >= max_cycles:
            break
        logger.info(f"--- Scheduler cycle finished. Waiting for {interval_seconds} seconds. ---")
        await asyncio.sleep(interval_seconds)


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL)
    logger.info("Starting notification scheduler...")
    asyncio.run(main_scheduler_loop())
