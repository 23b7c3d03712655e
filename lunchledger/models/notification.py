from enum import Enum
from typing import Optional

from lunchledger.models.base import MongoModel


class NotificationType(str, Enum):
    BILL_SPLIT = "BILL_SPLIT"
    PAYMENT_SETTLED = "PAYMENT_SETTLED"
    REMINDER = "REMINDER"


class Notification(MongoModel):
    user_id: str
    type: NotificationType
    message: str
    amount_cents: Optional[int] = None
    related_date: Optional[str] = None
    is_read: bool = False
