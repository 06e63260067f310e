# file: services/change_classifier.py

"""
Decides who hears about an update to a service record (booking).

Admin edits are assumed to be known to the admins already, so they only notify the
customer. Customer edits that affect the workshop's schedule (cancelling, changing
date, description or cost) are also broadcast to the admins.

`classify_service_update` is pure: it never touches the store or the push transport.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.models.notification import NotificationCategory
from app.models.service_record import BookingStatus, ServiceRecordSnapshot
from app.utils.formatting import as_utc, service_display_name


@dataclass(frozen=True)
class NotificationDecision:
    notify_user: bool = False
    user_title: str = ""
    user_body: str = ""
    notify_admins: bool = False
    admin_title: str = ""
    admin_body: str = ""
    category: str = NotificationCategory.SERVICE
    admin_category: str = NotificationCategory.BOOKING_MODIFIED
    reset_admin_marker: bool = False

    @property
    def is_noop(self) -> bool:
        return not (self.notify_user or self.notify_admins)


def is_admin_modified(after: ServiceRecordSnapshot) -> bool:
    return after.modified_by_admin is True


def _same_instant(a: Optional[datetime], b: Optional[datetime]) -> bool:
    if a is None or b is None:
        return a is b
    # Compare at second resolution, the precision the clients write
    return as_utc(a).replace(microsecond=0) == as_utc(b).replace(microsecond=0)


def details_changed(before: ServiceRecordSnapshot, after: ServiceRecordSnapshot) -> bool:
    """True when any customer-visible booking detail (date, description, cost) differs."""
    return (
        not _same_instant(before.service_date, after.service_date)
        or before.description != after.description
        or before.cost != after.cost
    )


def _admin_status_message(status: BookingStatus, raw_status: str, service: str):
    if status is BookingStatus.CONFIRMED:
        return "Booking Confirmed ✅", f"Your {service} booking has been confirmed by admin."
    if status is BookingStatus.COMPLETED:
        return "Service Completed ✅", f"Your {service} has been completed. Ready to collect!"
    if status is BookingStatus.CANCELED:
        return "Booking Canceled ❌", f"Your {service} booking has been canceled by admin. Please contact us."
    return "Booking Updated 🔄", f"Your {service} booking status: {raw_status}"


def _user_status_message(status: BookingStatus, raw_status: str, service: str):
    if status is BookingStatus.CONFIRMED:
        return "Booking Confirmed ✅", f"Your {service} booking has been confirmed."
    if status is BookingStatus.COMPLETED:
        return "Service Completed ✅", f"Your {service} has been completed. Ready to collect!"
    if status is BookingStatus.CANCELED:
        return "Booking Cancelled ❌", f"Your {service} booking has been cancelled."
    return "Service Update", f"{service} status: {raw_status}"


def classify_service_update(before: ServiceRecordSnapshot, after: ServiceRecordSnapshot,
                            customer_name: str = "Customer") -> NotificationDecision:
    """
    Returns at most one customer notification and at most one admin broadcast for a
    single update event.
    """
    admin_modified = is_admin_modified(after)
    service = service_display_name(after.service_type)
    category = NotificationCategory.ADMIN_MODIFIED if admin_modified else NotificationCategory.SERVICE

    if before.status != after.status:
        status = BookingStatus.parse(after.status)
        raw_status = after.status if after.status is not None else "unknown"

        if admin_modified:
            title, body = _admin_status_message(status, raw_status, service)
            return NotificationDecision(
                notify_user=True, user_title=title, user_body=body,
                category=category, reset_admin_marker=True,
            )

        title, body = _user_status_message(status, raw_status, service)
        if status is BookingStatus.CANCELED:
            return NotificationDecision(
                notify_user=True, user_title=title, user_body=body,
                notify_admins=True,
                admin_title="Booking Cancelled by User 🚫",
                admin_body=f"{customer_name} cancelled their {service} booking",
                category=category,
                admin_category=NotificationCategory.BOOKING_CANCELED,
            )
        return NotificationDecision(notify_user=True, user_title=title, user_body=body, category=category)

    if not details_changed(before, after):
        # Nothing the customer or the workshop cares about was touched
        return NotificationDecision(category=category, reset_admin_marker=admin_modified)

    if admin_modified:
        return NotificationDecision(
            notify_user=True,
            user_title="Booking Updated by Admin 🔄",
            user_body=f"Your {service} booking has been updated by admin.",
            category=category,
            reset_admin_marker=True,
        )

    return NotificationDecision(
        notify_user=True,
        user_title="Booking Updated 📝",
        user_body=f"Your {service} booking has been updated.",
        notify_admins=True,
        admin_title="Booking Modified by User 📝",
        admin_body=f"{customer_name} modified their {service} booking",
        category=category,
        admin_category=NotificationCategory.BOOKING_MODIFIED,
    )
