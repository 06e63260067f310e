# file: app/dependencies.py

from functools import lru_cache

from fastapi import Header, HTTPException, status
from typing import Optional

from app.config import TRIGGER_API_KEY
from app.database.connection import AsyncSessionLocal
from app.services.dispatcher import NotificationDispatcher
from app.services.event_handlers import EventHandlers
from app.services.notification_writer import InAppNotificationWriter
from app.services.push import create_push_transport
from app.services.reminder_scanner import ReminderScanner
from app.services.store import NotificationStore
from app.services.token_resolver import TokenResolver


def verify_trigger_key(x_api_key: Optional[str] = Header(default=None)):
    if TRIGGER_API_KEY and x_api_key != TRIGGER_API_KEY:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API Key")


@lru_cache
def get_store() -> NotificationStore:
    return NotificationStore(AsyncSessionLocal)


@lru_cache
def get_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(TokenResolver(get_store()), create_push_transport())


def get_event_handlers() -> EventHandlers:
    store = get_store()
    return EventHandlers(store, get_dispatcher(), InAppNotificationWriter(store))


def get_reminder_scanner() -> ReminderScanner:
    store = get_store()
    return ReminderScanner(store, get_dispatcher(), InAppNotificationWriter(store))
