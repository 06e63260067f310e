# file: services/token_resolver.py

import logging
from typing import Optional

from app.services.push import InvalidTokenError, UnregisteredTokenError
from app.services.store import NotificationStore

logger = logging.getLogger(__name__)

# Only these errors mean the token itself is dead; anything else (network, quota, ...) keeps it.
TOKEN_INVALIDATING_ERRORS = (InvalidTokenError, UnregisteredTokenError)


class TokenResolver:
    def __init__(self, store: NotificationStore):
        self.store = store

    async def resolve_token(self, user_id: str) -> Optional[str]:
        user = await self.store.get_user(user_id)
        if user is None:
            logger.info(f"User {user_id} not found")
            return None
        if not user.fcm_token:
            logger.info(f"No push token found for user {user_id}")
            return None
        return user.fcm_token

    async def invalidate_if_dead(self, user_id: str, error: Exception) -> bool:
        """Clears the stored token when `error` says it can never be delivered to again."""
        if not isinstance(error, TOKEN_INVALIDATING_ERRORS):
            return False
        await self.store.clear_fcm_token(user_id)
        logger.info(f"Removed invalid push token for user {user_id}")
        return True
