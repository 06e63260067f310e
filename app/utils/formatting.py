from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from app.config import DISPLAY_TIMEZONE
from app.models.service_record import ServiceType, SERVICE_TYPE_NAMES


def short_order_id(order_id: str) -> str:
    return order_id[:8]


def format_currency(amount: Optional[float]) -> str:
    return f"${(amount or 0.0):.2f}"


def service_display_name(service_type: Optional[str]) -> str:
    """Human readable name for a stored service type. Unknown types are shown as stored."""
    if not service_type:
        return SERVICE_TYPE_NAMES[ServiceType.OTHER]
    try:
        return SERVICE_TYPE_NAMES[ServiceType(service_type)]
    except ValueError:
        return service_type


def as_utc(value: datetime) -> datetime:
    # Naive values come from snapshots without an offset; they are read as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_display_time(value: datetime, tz_name: str = DISPLAY_TIMEZONE) -> datetime:
    return as_utc(value).astimezone(ZoneInfo(tz_name))


def format_service_date(value: Optional[datetime], tz_name: str = DISPLAY_TIMEZONE) -> str:
    """e.g. "Monday, October 19, 2026"."""
    if value is None:
        return "your scheduled date"
    local = to_display_time(value, tz_name)
    return f"{local:%A}, {local:%B} {local.day}, {local.year}"


def format_service_time(value: Optional[datetime], tz_name: str = DISPLAY_TIMEZONE) -> str:
    """e.g. "9:30 AM"."""
    if value is None:
        return "your scheduled time"
    local = to_display_time(value, tz_name)
    return local.strftime("%I:%M %p").lstrip("0")
