# file: services/notification_writer.py

import logging
from typing import Iterable, List, Optional

from app.models.notification import NotificationCreate
from app.services.store import NotificationStore

logger = logging.getLogger(__name__)


class InAppNotificationWriter:
    """
    Appends in-app notification records. There is no idempotency key: callers decide
    how many records a logical event produces.
    """

    def __init__(self, store: NotificationStore):
        self.store = store

    async def write(self, notification: NotificationCreate) -> None:
        await self.store.add_notifications([notification])
        logger.info(f"In-app notification '{notification.type}' written for user {notification.user_id}")

    async def write_many(self, user_ids: Iterable[str], title: str, message: str, type: str,
                         related_id: Optional[str] = None) -> List[NotificationCreate]:
        notifications = [
            NotificationCreate(user_id=user_id, title=title, message=message, type=type, related_id=related_id)
            for user_id in user_ids
        ]
        await self.store.add_notifications(notifications)
        logger.info(f"In-app notification '{type}' written for {len(notifications)} users")
        return notifications
