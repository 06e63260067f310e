# file: models/order.py

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class OrderStatus(str, Enum):
    CREATED = "created"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "OrderStatus":
        """Maps a stored status string to a known status, or OTHER for anything unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class OrderSnapshot(BaseModel):
    """An order document as delivered by the trigger runtime."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    user_id: Optional[str] = None
    customer_name: Optional[str] = None
    total_amount: Optional[float] = None
    status: Optional[str] = None


class OrderChange(BaseModel):
    before: OrderSnapshot
    after: OrderSnapshot
