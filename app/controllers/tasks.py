# file: controllers/tasks.py

from dataclasses import asdict

from fastapi import APIRouter, Depends

from app.dependencies import get_reminder_scanner, verify_trigger_key
from app.services.reminder_scanner import ReminderScanner

router = APIRouter(dependencies=[Depends(verify_trigger_key)])


@router.post("/booking-reminders")
async def run_booking_reminders(scanner: ReminderScanner = Depends(get_reminder_scanner)):
    """Entry point for an external cron (e.g. Cloud Scheduler) hitting the service hourly."""
    result = await scanner.scan()
    return asdict(result)
