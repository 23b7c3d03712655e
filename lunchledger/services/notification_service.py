import logging
from datetime import datetime
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from lunchledger.core.config import settings
from lunchledger.models.notification import Notification, NotificationType
from lunchledger.repositories.notification_repo import NotificationRepository

logger = logging.getLogger(__name__)


def format_amount(amount_cents: int) -> str:
    """Render cents as a whole-unit amount with the configured currency symbol."""
    units = abs(amount_cents) / 100
    if abs(amount_cents) % 100 == 0:
        return f"{settings.CURRENCY_SYMBOL}{units:.0f}"
    return f"{settings.CURRENCY_SYMBOL}{units:.2f}"


def bill_split_message(payer_name: str, total_cents: int, share_cents: int,
                       related_date: Optional[str]) -> str:
    day = f" for {related_date}" if related_date else ""
    return (
        f"{payer_name} paid {format_amount(total_cents)}{day} 🍕 "
        f"you owe {format_amount(share_cents)}"
    )


def settlement_message(payer_name: str, amount_cents: int) -> str:
    return f"{payer_name} paid you {format_amount(amount_cents)} 💸 debt cleared"


def reminder_message(creditor_name: str, amount_cents: int) -> str:
    return f"You still owe {format_amount(amount_cents)} to {creditor_name} 💀 time to settle up"


class NotificationService:
    """
    Notification sink used by the ledger.

    Emission is best effort: a failed insert is logged and never undoes the
    balance change that triggered it. Duplicates are tolerable, lost balance
    updates are not.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.repo = NotificationRepository(db)

    async def emit(
        self,
        user_id: str,
        notification_type: NotificationType,
        message: str,
        amount_cents: Optional[int] = None,
        related_date: Optional[str] = None,
    ) -> Optional[Notification]:
        notification = Notification(
            user_id=user_id,
            type=notification_type,
            message=message,
            amount_cents=amount_cents,
            related_date=related_date,
        )
        try:
            return await self.repo.insert(notification)
        except PyMongoError:
            logger.exception(
                "Failed to insert %s notification for user %s",
                notification_type.value, user_id
            )
            return None

    async def emit_many(self, notifications: List[Notification]) -> int:
        """Insert a batch; returns how many were stored (0 on failure)."""
        try:
            await self.repo.insert_many(notifications)
        except PyMongoError:
            logger.exception("Failed to insert %d notifications", len(notifications))
            return 0
        return len(notifications)

    async def has_recent(
        self, user_id: str, notification_type: NotificationType, since: datetime
    ) -> bool:
        return await self.repo.exists_since(user_id, notification_type, since)

    async def list_for_user(self, user_id: str) -> List[Notification]:
        return await self.repo.list_for_user(user_id, limit=settings.NOTIFICATION_PAGE_SIZE)

    async def count_unread(self, user_id: str) -> int:
        return await self.repo.count_unread(user_id)

    async def mark_read(self, notification_id: str) -> Optional[Notification]:
        return await self.repo.mark_read(notification_id)

    async def mark_all_read(self, user_id: str) -> int:
        return await self.repo.mark_all_read(user_id)
