import pytest
import pytest_asyncio
from typing import AsyncGenerator, Dict, List, Optional
from uuid import uuid4

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.database.connection import init_db
from app.database.models import User
from app.services.dispatcher import NotificationDispatcher
from app.services.event_handlers import EventHandlers
from app.services.notification_writer import InAppNotificationWriter
from app.services.push import PushTransport, DEFAULT_HINTS
from app.services.reminder_scanner import ReminderScanner
from app.services.store import NotificationStore
from app.services.token_resolver import TokenResolver


class FakePushTransport(PushTransport):
    """Push transport that records sends in memory. Tokens listed in `failures` raise instead."""

    def __init__(self):
        self.sent_pushes: List[dict] = []
        self.failures: Dict[str, Exception] = {}

    async def send(self, token, title, body, data=None, hints=DEFAULT_HINTS):
        if token in self.failures:
            raise self.failures[token]
        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append({
            "message_id": message_id,
            "token": token,
            "title": title,
            "body": body,
            "data": data,
            "hints": hints,
        })
        return message_id

    def sent_to(self, token: str) -> List[dict]:
        return [p for p in self.sent_pushes if p["token"] == token]

    def tokens(self) -> List[str]:
        return [p["token"] for p in self.sent_pushes]


# --- CORE FIXTURES ---

@pytest_asyncio.fixture(scope="function")
async def store(tmp_path) -> AsyncGenerator[NotificationStore, None]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(bind=engine)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield NotificationStore(session_factory)
    await engine.dispose()


@pytest.fixture
def push() -> FakePushTransport:
    return FakePushTransport()


@pytest.fixture
def dispatcher(store, push) -> NotificationDispatcher:
    return NotificationDispatcher(TokenResolver(store), push)


@pytest.fixture
def writer(store) -> InAppNotificationWriter:
    return InAppNotificationWriter(store)


@pytest.fixture
def handlers(store, dispatcher, writer) -> EventHandlers:
    return EventHandlers(store, dispatcher, writer, tz_name="UTC")


@pytest.fixture
def scanner(store, dispatcher, writer) -> ReminderScanner:
    return ReminderScanner(store, dispatcher, writer, tz_name="UTC")


async def _add_user(store: NotificationStore, user_id: str, name: Optional[str], token: Optional[str],
                    is_admin: bool = False) -> User:
    return await store.add_user(User(id=user_id, name=name, fcm_token=token, is_admin=is_admin))


@pytest_asyncio.fixture(scope="function")
async def customer(store) -> User:
    return await _add_user(store, "u1", "Alice Driver", "tok-u1")


@pytest_asyncio.fixture(scope="function")
async def admins(store) -> List[User]:
    return [
        await _add_user(store, "a1", "Admin One", "tok-a1", is_admin=True),
        await _add_user(store, "a2", "Admin Two", "tok-a2", is_admin=True),
    ]
