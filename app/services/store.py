# file: services/store.py

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database.models import User, Vehicle, ServiceRecord, Notification
from app.models.notification import NotificationCreate


class NotificationStore:
    """
    Data access used by the notification engine. Every call runs in its own short
    session so concurrent fan-out sends never share one.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    # --- users ---

    async def get_user(self, user_id: str) -> Optional[User]:
        async with self._session_factory() as db:
            return await db.get(User, user_id)

    async def get_admin_ids(self) -> List[str]:
        async with self._session_factory() as db:
            result = await db.execute(select(User.id).where(User.is_admin == True))  # noqa: E712
            return list(result.scalars().all())

    async def clear_fcm_token(self, user_id: str) -> None:
        async with self._session_factory() as db:
            await db.execute(update(User).where(User.id == user_id).values(fcm_token=None))
            await db.commit()

    async def add_user(self, user: User) -> User:
        async with self._session_factory() as db:
            db.add(user)
            await db.commit()
            return user

    # --- vehicles ---

    async def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        async with self._session_factory() as db:
            return await db.get(Vehicle, vehicle_id)

    async def add_vehicle(self, vehicle: Vehicle) -> Vehicle:
        async with self._session_factory() as db:
            db.add(vehicle)
            await db.commit()
            return vehicle

    # --- service records ---

    async def get_service_record(self, record_id: str) -> Optional[ServiceRecord]:
        async with self._session_factory() as db:
            return await db.get(ServiceRecord, record_id)

    async def add_service_record(self, record: ServiceRecord) -> ServiceRecord:
        async with self._session_factory() as db:
            db.add(record)
            await db.commit()
            return record

    async def find_due_reminders(self, window_start: datetime, window_end: datetime) -> List[ServiceRecord]:
        """Bookings scheduled inside [window_start, window_end] that have not been reminded yet."""
        stmt = (
            select(ServiceRecord)
            .where(
                ServiceRecord.service_date >= window_start,
                ServiceRecord.service_date <= window_end,
                ServiceRecord.reminder_sent == False  # noqa: E712
            )
            .order_by(ServiceRecord.service_date)
        )
        async with self._session_factory() as db:
            result = await db.execute(stmt)
            return list(result.scalars().all())

    async def mark_reminder_sent(self, record_id: str) -> None:
        async with self._session_factory() as db:
            await db.execute(
                update(ServiceRecord).where(ServiceRecord.id == record_id).values(reminder_sent=True)
            )
            await db.commit()

    async def reset_modified_by_admin(self, record_id: str) -> None:
        async with self._session_factory() as db:
            await db.execute(
                update(ServiceRecord).where(ServiceRecord.id == record_id).values(modified_by_admin=False)
            )
            await db.commit()

    # --- notifications ---

    async def add_notifications(self, notifications: Iterable[NotificationCreate]) -> List[Notification]:
        rows = [Notification(**n.model_dump(), is_read=False) for n in notifications]
        if not rows:
            return []
        async with self._session_factory() as db:
            db.add_all(rows)
            await db.commit()
            return rows

    async def list_notifications(self, user_id: str) -> List[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.id)
        )
        async with self._session_factory() as db:
            result = await db.execute(stmt)
            return list(result.scalars().all())
