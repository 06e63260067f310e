# file: services/event_handlers.py

import logging

from app.config import DISPLAY_TIMEZONE
from app.models.notification import NotificationCategory, NotificationCreate, PushType
from app.models.order import OrderSnapshot, OrderStatus
from app.models.service_record import ServiceRecordSnapshot
from app.services.change_classifier import classify_service_update, is_admin_modified
from app.services.dispatcher import NotificationDispatcher
from app.services.notification_writer import InAppNotificationWriter
from app.services.store import NotificationStore
from app.utils.formatting import short_order_id, format_currency, service_display_name, format_service_date

logger = logging.getLogger(__name__)


def order_status_message(order_id: str, status: str):
    short_id = short_order_id(order_id)
    parsed = OrderStatus.parse(status)
    if parsed is OrderStatus.PROCESSING:
        return "Order Processing 🔄", f"Your order #{short_id} is now being processed."
    if parsed is OrderStatus.SHIPPED:
        return "Order Shipped 🚚", f"Your order #{short_id} has been shipped!"
    if parsed is OrderStatus.DELIVERED:
        return "Order Delivered ✅", f"Your order #{short_id} has been delivered. Thank you!"
    if parsed is OrderStatus.CANCELLED:
        return "Order Cancelled ❌", f"Your order #{short_id} has been cancelled."
    return "Order Update", f"Your order #{short_id} status: {status}"


class EventHandlers:
    """
    One entry point per watched collection event. The trigger runtime retries failed
    invocations, so every handler logs unexpected errors and returns normally instead
    of raising.
    """

    def __init__(self, store: NotificationStore, dispatcher: NotificationDispatcher,
                 writer: InAppNotificationWriter, tz_name: str = DISPLAY_TIMEZONE):
        self.store = store
        self.dispatcher = dispatcher
        self.writer = writer
        self.tz_name = tz_name

    # --- orders ---

    async def on_order_created(self, order_id: str, order: OrderSnapshot) -> None:
        logger.info(f"New order created: {order_id}")
        try:
            short_id = short_order_id(order_id)
            total = format_currency(order.total_amount)
            title = "Order Confirmed! 🎉"

            if order.user_id:
                await self.dispatcher.send_to_user(
                    order.user_id,
                    title,
                    f"Your order #{short_id} has been confirmed. Total: {total}",
                    {"type": PushType.ORDER, "orderId": order_id},
                )

            # Admins get a push only, no in-app record
            await self.dispatcher.send_to_admins(
                "New Order Received 📦",
                f"Order #{short_id} - {total} from {order.customer_name or 'Guest'}",
                {"type": PushType.ADMIN_ORDER, "orderId": order_id},
            )

            if order.user_id:
                await self.writer.write(NotificationCreate(
                    user_id=order.user_id,
                    title=title,
                    message=f"Your order #{short_id} has been confirmed.",
                    type=NotificationCategory.ORDER,
                    related_id=order_id,
                ))
        except Exception:
            logger.exception(f"Error handling order creation for {order_id}")

    async def on_order_updated(self, order_id: str, before: OrderSnapshot, after: OrderSnapshot) -> None:
        if before.status == after.status:
            return

        logger.info(f"Order {order_id} status changed: {before.status} -> {after.status}")
        try:
            title, body = order_status_message(order_id, after.status)
            if not after.user_id:
                logger.info(f"Order {order_id} has no owning user, nobody to notify")
                return

            await self.dispatcher.send_to_user(
                after.user_id,
                title,
                body,
                {"type": PushType.ORDER_UPDATE, "orderId": order_id, "status": after.status},
            )
            await self.writer.write(NotificationCreate(
                user_id=after.user_id,
                title=title,
                message=body,
                type=NotificationCategory.ORDER,
                related_id=order_id,
            ))
        except Exception:
            logger.exception(f"Error handling order update for {order_id}")

    # --- service records ---

    async def on_service_record_created(self, record_id: str, record: ServiceRecordSnapshot) -> None:
        logger.info(f"New service record created: {record_id}")
        try:
            service = service_display_name(record.service_type)
            service_date = format_service_date(record.service_date, self.tz_name)
            title = "Booking Confirmed! 🔧"

            if record.user_id:
                await self.dispatcher.send_to_user(
                    record.user_id,
                    title,
                    f"Your {service} booking for {service_date} has been confirmed.",
                    {"type": PushType.SERVICE, "recordId": record_id},
                )
                await self.writer.write(NotificationCreate(
                    user_id=record.user_id,
                    title=title,
                    message=f"Your {service} booking has been confirmed.",
                    type=NotificationCategory.SERVICE,
                    related_id=record_id,
                ))

            # Guest bookings still reach the workshop
            admin_title = "New Service Booking 🔧"
            admin_body = f"{service} booking from {record.customer_name or 'Customer'} on {service_date}"
            admin_ids = await self.dispatcher.send_to_admins(
                admin_title,
                admin_body,
                {"type": PushType.ADMIN_SERVICE, "recordId": record_id},
            )
            await self.writer.write_many(
                admin_ids, admin_title, admin_body, NotificationCategory.NEW_BOOKING, related_id=record_id,
            )
        except Exception:
            logger.exception(f"Error handling service record creation for {record_id}")

    async def on_service_record_updated(self, record_id: str, before: ServiceRecordSnapshot,
                                        after: ServiceRecordSnapshot) -> None:
        admin_modified = is_admin_modified(after)
        logger.info(
            f"Service record {record_id} updated: status {before.status} -> {after.status}, "
            f"modified by admin: {admin_modified}"
        )
        reset_marker = admin_modified
        try:
            customer_name = await self._customer_name(after)
            decision = classify_service_update(before, after, customer_name)
            reset_marker = decision.reset_admin_marker

            if decision.is_noop:
                logger.info(f"Service record {record_id}: no notifiable change")

            if decision.notify_user and after.user_id:
                await self.dispatcher.send_to_user(
                    after.user_id,
                    decision.user_title,
                    decision.user_body,
                    {"type": PushType.SERVICE_UPDATE, "recordId": record_id, "status": after.status},
                )
                await self.writer.write(NotificationCreate(
                    user_id=after.user_id,
                    title=decision.user_title,
                    message=decision.user_body,
                    type=decision.category,
                    related_id=record_id,
                ))

            if decision.notify_admins:
                admin_ids = await self.dispatcher.send_to_admins(
                    decision.admin_title,
                    decision.admin_body,
                    {"type": PushType.ADMIN_BOOKING_UPDATE, "recordId": record_id},
                )
                # One record per admin, not a shared one
                await self.writer.write_many(
                    admin_ids, decision.admin_title, decision.admin_body, decision.admin_category,
                    related_id=record_id,
                )
        except Exception:
            logger.exception(f"Error handling service record update for {record_id}")

        # The marker is consumed once, even when a send or write above failed
        if reset_marker:
            try:
                await self.store.reset_modified_by_admin(record_id)
            except Exception:
                logger.exception(f"Could not reset modifiedByAdmin on service record {record_id}")

    async def _customer_name(self, record: ServiceRecordSnapshot) -> str:
        """Best effort: the owner's profile name, else the guest name on the booking."""
        if record.user_id:
            try:
                user = await self.store.get_user(record.user_id)
                if user is not None and user.name:
                    return user.name
            except Exception as e:
                logger.warning(f"Could not fetch customer name for {record.user_id}: {e!r}")
        return record.customer_name or "Customer"
