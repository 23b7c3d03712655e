from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    type: str
    message: str
    amount_cents: Optional[int] = None
    related_date: Optional[str] = None
    is_read: bool
    created_at: datetime


class NotificationFeedResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int


class ReminderScanResponse(BaseModel):
    sent: int
