# file: models/notification.py

from pydantic import BaseModel
from typing import Optional


class NotificationCategory:
    """Values stored in Notification.type and read by the client's notification list."""
    ORDER = "order"
    SERVICE = "service"
    ADMIN_MODIFIED = "adminModified"
    BOOKING_CANCELED = "bookingCanceled"
    BOOKING_MODIFIED = "bookingModified"
    NEW_BOOKING = "newBooking"


class PushType:
    """Values of the "type" key in push data payloads, used by the client for routing."""
    ORDER = "order"
    ADMIN_ORDER = "admin_order"
    ORDER_UPDATE = "order_update"
    SERVICE = "service"
    ADMIN_SERVICE = "admin_service"
    SERVICE_UPDATE = "service_update"
    ADMIN_BOOKING_UPDATE = "admin_booking_update"
    REMINDER = "reminder"


class NotificationCreate(BaseModel):
    user_id: str
    title: str
    message: str
    type: str = "general"
    related_id: Optional[str] = None