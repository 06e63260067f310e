# file: models/service_record.py

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BookingStatus(str, Enum):
    CONFIRMED = "Booking Confirmed"
    COMPLETED = "Completed"
    CANCELED = "Booking Canceled"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "BookingStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# Spellings that end a booking's lifecycle; the lowercase ones come from older clients.
TERMINAL_BOOKING_STATUSES = {
    "completed",
    "booking canceled",
    "booking cancelled",
    "canceled",
    "cancelled",
}


def is_terminal_booking_status(status: Optional[str]) -> bool:
    return bool(status) and status.strip().lower() in TERMINAL_BOOKING_STATUSES


class ServiceType(str, Enum):
    CARPLAY = "carplay"
    GEARBOX = "gearbox"
    XHP_REMAP = "xhp_remap"
    REGULAR = "regular"
    OTHER = "other"


SERVICE_TYPE_NAMES = {
    ServiceType.CARPLAY: "CarPlay Installation",
    ServiceType.GEARBOX: "Gearbox Service",
    ServiceType.XHP_REMAP: "BMW XHP Gearbox Remap",
    ServiceType.REGULAR: "Regular Service",
    ServiceType.OTHER: "Service",
}


class ServiceRecordSnapshot(BaseModel):
    """A service record (booking) document as delivered by the trigger runtime."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    user_id: Optional[str] = None
    customer_name: Optional[str] = None
    service_type: Optional[str] = None
    service_date: Optional[datetime] = None
    status: Optional[str] = None
    modified_by_admin: Optional[bool] = None
    reminder_sent: Optional[bool] = None
    cost: Optional[float] = None
    description: Optional[str] = None
    vehicle_id: Optional[str] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None


class ServiceRecordChange(BaseModel):
    before: ServiceRecordSnapshot
    after: ServiceRecordSnapshot
