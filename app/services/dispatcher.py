# file: services/dispatcher.py

import asyncio
import logging
from typing import Awaitable, Dict, Iterable, List, Optional

from app.services.push import PushTransport, PlatformHints, DEFAULT_HINTS
from app.services.token_resolver import TokenResolver

logger = logging.getLogger(__name__)


async def gather_isolated(aws: Iterable[Awaitable], label: str = "task") -> List:
    """
    Runs every awaitable concurrently and waits for all of them. A failure in one never
    cancels the others; failures are logged and returned in place of the result.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, Exception):
            logger.error(f"{label} failed: {result!r}")
    return results


class NotificationDispatcher:
    """Sends push notifications. Never raises: every failure is logged where it happens."""

    def __init__(self, resolver: TokenResolver, transport: PushTransport, hints: PlatformHints = DEFAULT_HINTS):
        self.resolver = resolver
        self.transport = transport
        self.hints = hints

    async def send_to_user(self, user_id: str, title: str, body: str,
                           data: Optional[Dict[str, str]] = None) -> bool:
        try:
            token = await self.resolver.resolve_token(user_id)
            if not token:
                return False

            message_id = await self.transport.send(token, title, body, _flatten(data), self.hints)
            logger.info(f"Successfully sent notification to user {user_id}: {message_id}")
            return True
        except Exception as e:
            logger.error(f"Error sending notification to user {user_id}: {e!r}")
            try:
                await self.resolver.invalidate_if_dead(user_id, e)
            except Exception as clear_error:
                logger.error(f"Could not clear push token for user {user_id}: {clear_error!r}")
            return False

    async def send_to_admins(self, title: str, body: str, data: Optional[Dict[str, str]] = None) -> List[str]:
        """Pushes to every admin concurrently. Returns the admin ids that were targeted."""
        try:
            admin_ids = await self.resolver.store.get_admin_ids()
        except Exception as e:
            logger.error(f"Error loading admin users: {e!r}")
            return []

        if not admin_ids:
            logger.info("No admin users found")
            return []

        results = await gather_isolated(
            (self.send_to_user(admin_id, title, body, data) for admin_id in admin_ids),
            label="Admin notification",
        )
        sent = sum(1 for r in results if r is True)
        logger.info(f"Sent notifications to {sent}/{len(admin_ids)} admins")
        return admin_ids


def _flatten(data: Optional[Dict[str, object]]) -> Dict[str, str]:
    # FCM data payloads only accept string values
    return {str(k): str(v) for k, v in (data or {}).items() if v is not None}
