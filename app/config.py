# file: app/config.py

import os
from dotenv import load_dotenv

load_dotenv()

DB_USER = os.getenv("DB_USER")
DB_PASSWORD = os.getenv("DB_PASSWORD")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME")

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    if DB_PASSWORD:
        DATABASE_URL = f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    else:
        # Local development without Postgres
        DATABASE_URL = "sqlite+aiosqlite:///./notifications.db"

FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS", "serviceAccountKey.json")

# "fcm" (Firebase Cloud Messaging) or "expo" (Expo push API)
PUSH_PROVIDER = os.getenv("PUSH_PROVIDER", "fcm").lower()
EXPO_PUSH_URL = os.getenv("EXPO_PUSH_URL", "https://exp.host/--/api/v2/push/send")

# Shared secret expected in the X-API-Key header of trigger/task calls. Unset disables the check.
TRIGGER_API_KEY = os.getenv("TRIGGER_API_KEY")

DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "America/New_York")
REMINDER_INTERVAL_SECONDS = int(os.getenv("REMINDER_INTERVAL_SECONDS", "3600"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
