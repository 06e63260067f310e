# file: services/reminder_scanner.py

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from app.config import DISPLAY_TIMEZONE
from app.database.models import ServiceRecord
from app.models.notification import NotificationCategory, NotificationCreate, PushType
from app.models.service_record import is_terminal_booking_status
from app.services.dispatcher import NotificationDispatcher
from app.services.notification_writer import InAppNotificationWriter
from app.services.store import NotificationStore
from app.utils.formatting import service_display_name, format_service_date, format_service_time

logger = logging.getLogger(__name__)

# A two hour window around the 24h mark, wide enough to absorb an hourly scan cadence.
# TODO: no catch-up for bookings that cross the window while the scanner is down for >2h.
WINDOW_START = timedelta(hours=23)
WINDOW_END = timedelta(hours=25)


def reminder_window(now: datetime) -> Tuple[datetime, datetime]:
    return now + WINDOW_START, now + WINDOW_END


@dataclass
class ReminderScanResult:
    matched: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0


class ReminderScanner:
    def __init__(self, store: NotificationStore, dispatcher: NotificationDispatcher,
                 writer: InAppNotificationWriter, tz_name: str = DISPLAY_TIMEZONE):
        self.store = store
        self.dispatcher = dispatcher
        self.writer = writer
        self.tz_name = tz_name

    async def scan(self, now: Optional[datetime] = None) -> ReminderScanResult:
        """Sends the one-time 24h reminder for every booking that entered the window."""
        now = now or datetime.now(timezone.utc)
        window_start, window_end = reminder_window(now)
        logger.info(f"Checking bookings between {window_start.isoformat()} and {window_end.isoformat()}")

        result = ReminderScanResult()
        records = await self.store.find_due_reminders(window_start, window_end)
        if not records:
            logger.info("No bookings found that need reminders")
            return result

        result.matched = len(records)
        logger.info(f"Found {len(records)} bookings that need reminders")

        for record in records:
            # One bad record must not stop the rest of the scan
            try:
                if await self.process(record):
                    result.processed += 1
                else:
                    result.skipped += 1
            except Exception:
                result.failed += 1
                logger.exception(f"Error sending reminder for booking {record.id}")

        logger.info(f"Finished sending booking reminders: {result}")
        return result

    async def process(self, record: ServiceRecord) -> bool:
        """Returns False when the booking was skipped without touching its marker."""
        if is_terminal_booking_status(record.status):
            logger.info(f"Skipping {record.id} - status: {record.status}")
            return False

        service = service_display_name(record.service_type)
        date_str = format_service_date(record.service_date, self.tz_name)
        time_str = format_service_time(record.service_date, self.tz_name)
        vehicle = await self._vehicle_description(record)
        name = await self._display_name(record)

        try:
            if record.user_id:
                title = "Booking Reminder 🔔"
                body = f"Your {service} appointment is tomorrow at {time_str}"
                if vehicle:
                    body += f" for your {vehicle}"

                await self.dispatcher.send_to_user(
                    record.user_id, title, body, {"type": PushType.REMINDER, "recordId": record.id},
                )

                message = f"Hi {name}, your {service} appointment is scheduled for {date_str} at {time_str}."
                if vehicle:
                    message += f" Vehicle: {vehicle}"
                await self.writer.write(NotificationCreate(
                    user_id=record.user_id,
                    title=title,
                    message=message,
                    type=NotificationCategory.SERVICE,
                    related_id=record.id,
                ))
                logger.info(f"Sent reminder for booking {record.id} to user {record.user_id}")
            else:
                logger.info(f"No userId found for booking {record.id} ({name}) - cannot send reminder")
        finally:
            # Once a send was attempted the booking must not be picked up by the next scan,
            # even if delivery or the in-app write failed
            await self.store.mark_reminder_sent(record.id)
        return True

    async def _display_name(self, record: ServiceRecord) -> str:
        if record.user_id:
            try:
                user = await self.store.get_user(record.user_id)
                if user is not None and user.name:
                    return user.name
            except Exception as e:
                logger.warning(f"Could not fetch user {record.user_id} for booking {record.id}: {e!r}")
        return record.customer_name or "Customer"

    async def _vehicle_description(self, record: ServiceRecord) -> str:
        if record.vehicle_id:
            try:
                vehicle = await self.store.get_vehicle(record.vehicle_id)
                if vehicle is not None:
                    return f"{vehicle.make or ''} {vehicle.model or ''}".strip()
            except Exception as e:
                logger.warning(f"Could not fetch vehicle {record.vehicle_id} for booking {record.id}: {e!r}")
        if record.vehicle_make and record.vehicle_model:
            return f"{record.vehicle_make} {record.vehicle_model}"
        return ""
