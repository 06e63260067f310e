# file: services/push.py

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

import firebase_admin
import httpx
from firebase_admin import credentials, exceptions, messaging

from app.config import FIREBASE_CREDENTIALS, PUSH_PROVIDER, EXPO_PUSH_URL

logger = logging.getLogger(__name__)


class PushDeliveryError(Exception):
    """A push could not be delivered. Transient unless it is one of the token errors below."""


class InvalidTokenError(PushDeliveryError):
    """The transport rejected the token as malformed."""


class UnregisteredTokenError(PushDeliveryError):
    """The token was valid once but the device/app is no longer registered."""


@dataclass(frozen=True)
class PlatformHints:
    sound: str = "default"
    android_priority: str = "high"
    badge: int = 1


DEFAULT_HINTS = PlatformHints()


class PushTransport(ABC):
    """Outbound push port. FCM and Expo implement it; tests swap in an in-memory fake."""

    @abstractmethod
    async def send(self, token: str, title: str, body: str, data: Optional[Dict[str, str]] = None,
                   hints: PlatformHints = DEFAULT_HINTS) -> str:
        """Sends one push and returns the provider's message id. Raises PushDeliveryError on failure."""


def init_firebase(credentials_path: str = FIREBASE_CREDENTIALS) -> None:
    # Singleton pattern: only initialize the default app once per process
    if not firebase_admin._apps:
        try:
            cred = credentials.Certificate(credentials_path)
            firebase_admin.initialize_app(cred)
            logger.info("Firebase Admin SDK initialized successfully.")
        except Exception as e:
            logger.error(f"FATAL: Error initializing Firebase Admin SDK: {e}")
            raise


class FcmPushTransport(PushTransport):
    """Firebase Cloud Messaging through the Admin SDK."""

    def build_message(self, token: str, title: str, body: str, data: Optional[Dict[str, str]],
                      hints: PlatformHints) -> messaging.Message:
        return messaging.Message(
            token=token,
            notification=messaging.Notification(title=title, body=body),
            data=data or {},
            android=messaging.AndroidConfig(
                notification=messaging.AndroidNotification(sound=hints.sound, priority=hints.android_priority),
            ),
            apns=messaging.APNSConfig(
                payload=messaging.APNSPayload(aps=messaging.Aps(sound=hints.sound, badge=hints.badge)),
            ),
        )

    async def send(self, token, title, body, data=None, hints=DEFAULT_HINTS) -> str:
        message = self.build_message(token, title, body, data, hints)
        try:
            # messaging.send is blocking; keep the event loop free for concurrent fan-out
            return await asyncio.to_thread(messaging.send, message)
        except messaging.UnregisteredError as e:
            raise UnregisteredTokenError(str(e)) from e
        except exceptions.InvalidArgumentError as e:
            if "registration token" in str(e).lower():
                raise InvalidTokenError(str(e)) from e
            raise PushDeliveryError(str(e)) from e
        except exceptions.FirebaseError as e:
            raise PushDeliveryError(str(e)) from e


class ExpoPushTransport(PushTransport):
    """Expo push API, for clients that register Expo push tokens instead of raw FCM tokens."""

    headers = {
        'Accept': 'application/json',
        'Accept-Encoding': 'gzip, deflate',
        'Content-Type': 'application/json',
    }

    def __init__(self, url: str = EXPO_PUSH_URL, client: Optional[httpx.AsyncClient] = None):
        self.url = url
        self._client = client

    def build_payload(self, token, title, body, data, hints: PlatformHints) -> dict:
        return {
            'to': token,
            'sound': hints.sound,
            'priority': hints.android_priority,
            'badge': hints.badge,
            'title': title,
            'body': body,
            'data': data or {},
            'channelId': 'default',  # Required for custom Android notification channels
        }

    async def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.url, json=payload, headers=self.headers, timeout=10)
        async with httpx.AsyncClient() as client:
            return await client.post(self.url, json=payload, headers=self.headers, timeout=10)

    async def send(self, token, title, body, data=None, hints=DEFAULT_HINTS) -> str:
        payload = self.build_payload(token, title, body, data, hints)
        try:
            response = await self._post(payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            text = e.response.text
            if "DeviceNotRegistered" in text:
                raise UnregisteredTokenError(text) from e
            if "not a valid Expo push token" in text:
                raise InvalidTokenError(text) from e
            raise PushDeliveryError(f"Expo server responded with {e.response.status_code}: {text}") from e
        except httpx.RequestError as e:
            raise PushDeliveryError(f"An error occurred while requesting Expo's push service: {e}") from e

        ticket = response.json().get("data") or {}
        if isinstance(ticket, list):
            ticket = ticket[0] if ticket else {}
        if ticket.get("status") == "error":
            error_code = (ticket.get("details") or {}).get("error")
            if error_code == "DeviceNotRegistered":
                raise UnregisteredTokenError(ticket.get("message", error_code))
            raise PushDeliveryError(ticket.get("message") or error_code or "Unknown Expo error")
        return ticket.get("id", "")


def create_push_transport(provider: str = PUSH_PROVIDER) -> PushTransport:
    if provider == "expo":
        return ExpoPushTransport()
    if provider == "fcm":
        init_firebase()
        return FcmPushTransport()
    raise ValueError(f"Unknown PUSH_PROVIDER: {provider}")
