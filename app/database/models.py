from datetime import timezone

from sqlalchemy import Column, Integer, String, Text, Boolean, Float, DateTime, func
from sqlalchemy.types import TypeDecorator

from app.database.connection import Base


def _to_utc(value):
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Stores aware datetimes as UTC and hands them back aware. SQLite keeps only the
    wall-clock part, so offsets are normalised before they reach the driver. Applies to
    query parameters too, which keeps range comparisons on the same clock.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return _to_utc(value)

    def process_result_value(self, value, dialect):
        return _to_utc(value)


# Reference fields (user_id, vehicle_id) are plain ids, not foreign keys: records may
# point at users or vehicles that the app has not synced yet.

class User(Base):
    __tablename__ = "users"
    id = Column(String(128), primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    fcm_token = Column(Text, nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False, index=True)


class Vehicle(Base):
    __tablename__ = "vehicles"
    id = Column(String(128), primary_key=True, index=True)
    make = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)


class ServiceRecord(Base):
    __tablename__ = "service_records"
    id = Column(String(128), primary_key=True, index=True)
    user_id = Column(String(128), nullable=True, index=True)
    customer_name = Column(String(255), nullable=True)
    service_type = Column(String(50), nullable=True)
    service_date = Column(UTCDateTime, nullable=True, index=True)
    status = Column(String(100), nullable=True)
    modified_by_admin = Column(Boolean, default=False, nullable=False)
    reminder_sent = Column(Boolean, default=False, nullable=False, index=True)
    cost = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    vehicle_id = Column(String(128), nullable=True)
    vehicle_make = Column(String(100), nullable=True)
    vehicle_model = Column(String(100), nullable=True)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(128), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    type = Column(String(50), nullable=False, default="general")
    related_id = Column(String(128), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
