"""
LedgerService - pairwise net balances between users.

Sign convention, used everywhere a pair is formed:
- a pair is stored once as (user_a, user_b) with user_a < user_b (see canonical_pair)
- net_amount_cents > 0 means user_a owes user_b, < 0 means user_b owes user_a

Every balance change goes through apply_pair_adjustment, which is a single
atomic increment at the storage layer.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from lunchledger.core.config import settings
from lunchledger.models.balance import BalancePair
from lunchledger.models.base import utcnow
from lunchledger.models.notification import Notification, NotificationType
from lunchledger.models.payment import SplitDetail
from lunchledger.models.settlement import Settlement
from lunchledger.repositories.balance_repo import BalanceRepository
from lunchledger.repositories.settlement_repo import SettlementRepository
from lunchledger.repositories.user_repo import UserRepository
from lunchledger.services.notification_service import (
    NotificationService,
    bill_split_message,
    reminder_message,
    settlement_message,
)
from lunchledger.utils.validation import (
    InvalidArgumentError,
    RollbackIncompleteError,
    validate_positive_amount,
    validate_shares,
)

logger = logging.getLogger(__name__)

UNKNOWN_USER_NAME = "Someone"


def canonical_pair(user_x: str, user_y: str) -> Tuple[str, str]:
    """
    Order two distinct user ids into (user_a, user_b).

    Ids are compared by their string form; ObjectId hex strings sort the same
    way as the underlying bytes.
    """
    x, y = str(user_x), str(user_y)
    if x == y:
        raise InvalidArgumentError("A balance needs two different users")
    return (x, y) if x < y else (y, x)


class LedgerService:
    def __init__(self, db: AsyncIOMotorDatabase, allow_overpayment: Optional[bool] = None):
        self.balances = BalanceRepository(db)
        self.settlements = SettlementRepository(db)
        self.users = UserRepository(db)
        self.notifications = NotificationService(db)
        if allow_overpayment is None:
            allow_overpayment = settings.ALLOW_OVERPAYMENT
        self.allow_overpayment = allow_overpayment

    async def apply_pair_adjustment(
        self, user_x: str, user_y: str, delta_cents: int
    ) -> Optional[BalancePair]:
        """
        Record that user_x now additionally owes user_y delta_cents.

        A negative delta means the reverse. Adjusting a user against
        themselves is a no-op and returns None.
        """
        if str(user_x) == str(user_y):
            return None
        user_a, user_b = canonical_pair(user_x, user_y)
        adjustment = delta_cents if str(user_x) == user_a else -delta_cents
        return await self.balances.increment(user_a, user_b, adjustment)

    async def record_split(
        self,
        payer_id: str,
        total_cents: int,
        shares: Iterable[SplitDetail],
        related_date: Optional[str] = None,
    ) -> List[BalancePair]:
        """
        Charge every non-payer share to the payer.

        All adjustments land or none do: if one fails, the ones already
        applied are reversed and the original error is re-raised. If some
        reversal fails too, every other reversal is still attempted and
        RollbackIncompleteError is raised from the original error. Zero
        shares are skipped. Returns the updated pairs.
        """
        shares = list(shares)
        validate_shares(total_cents, shares)
        payer_id = str(payer_id)
        owing = [s for s in shares if str(s.user_id) != payer_id and s.amount_cents > 0]

        applied: List[SplitDetail] = []
        updated: List[BalancePair] = []
        try:
            for share in owing:
                pair = await self.apply_pair_adjustment(share.user_id, payer_id, share.amount_cents)
                applied.append(share)
                updated.append(pair)
        except Exception as exc:
            logger.exception(
                "Split by %s failed after %d of %d adjustments, rolling back",
                payer_id, len(applied), len(owing)
            )
            unreversed = await self._rollback_split(payer_id, applied)
            if unreversed:
                raise RollbackIncompleteError(
                    f"Split by {payer_id} left {len(unreversed)} adjustment(s) applied",
                    unreversed,
                ) from exc
            raise

        logger.info(
            "Recorded split by %s: total=%d, %d debtors", payer_id, total_cents, len(owing)
        )

        payer_name = await self._user_name(payer_id)
        await self.notifications.emit_many([
            Notification(
                user_id=str(share.user_id),
                type=NotificationType.BILL_SPLIT,
                message=bill_split_message(payer_name, total_cents, share.amount_cents, related_date),
                amount_cents=share.amount_cents,
                related_date=related_date,
            )
            for share in owing
        ])
        return updated

    async def _rollback_split(
        self, payer_id: str, applied: List[SplitDetail]
    ) -> List[SplitDetail]:
        """Reverse every applied share; returns the ones that could not be reversed."""
        unreversed: List[SplitDetail] = []
        for share in reversed(applied):
            try:
                await self.apply_pair_adjustment(share.user_id, payer_id, -share.amount_cents)
            except Exception:
                logger.exception(
                    "Could not reverse %d owed by %s to %s",
                    share.amount_cents, share.user_id, payer_id
                )
                unreversed.append(share)
        return unreversed

    async def record_settlement(
        self, from_user_id: str, to_user_id: str, amount_cents: int
    ) -> BalancePair:
        """
        from_user_id pays to_user_id amount_cents, reducing what they owe.

        Unless overpayment is allowed, the payment may not exceed the current
        debt; that check and the decrement are one conditional update.
        """
        validate_positive_amount(amount_cents, "Settlement amount")
        from_user_id, to_user_id = str(from_user_id), str(to_user_id)
        if from_user_id == to_user_id:
            raise InvalidArgumentError("Cannot settle a debt with yourself")

        if self.allow_overpayment:
            pair = await self.apply_pair_adjustment(from_user_id, to_user_id, -amount_cents)
        else:
            user_a, user_b = canonical_pair(from_user_id, to_user_id)
            adjustment = -amount_cents if from_user_id == user_a else amount_cents
            pair = await self.balances.increment_if_covered(user_a, user_b, adjustment)
            if pair is None:
                logger.warning(
                    "Rejected settlement %s -> %s of %d: exceeds outstanding debt",
                    from_user_id, to_user_id, amount_cents
                )
                raise InvalidArgumentError("Settlement amount exceeds the outstanding debt")

        logger.info("Recorded settlement %s -> %s: %d", from_user_id, to_user_id, amount_cents)

        try:
            await self.settlements.insert(Settlement(
                from_user_id=from_user_id,
                to_user_id=to_user_id,
                amount_cents=amount_cents,
            ))
        except PyMongoError:
            logger.exception("Failed to log settlement %s -> %s", from_user_id, to_user_id)

        payer_name = await self._user_name(from_user_id)
        await self.notifications.emit(
            to_user_id,
            NotificationType.PAYMENT_SETTLED,
            settlement_message(payer_name, amount_cents),
            amount_cents=amount_cents,
        )
        return pair

    async def get_balances_for_user(self, user_id: str) -> List[Tuple[str, int]]:
        """
        Outstanding balances from user_id's point of view.

        Returns (other_user_id, amount_cents) where positive means user_id owes
        the other user and negative means the other user owes user_id. Settled
        pairs are left out.
        """
        user_id = str(user_id)
        pairs = await self.balances.list_for_user(user_id)
        return [
            (pair.other(user_id), pair.relative_to(user_id))
            for pair in pairs
            if not pair.is_settled()
        ]

    async def scan_and_remind(
        self, window: Optional[timedelta] = None, now: Optional[datetime] = None
    ) -> int:
        """
        Send one REMINDER to each debtor with an outstanding balance.

        A debtor who already got a reminder inside the trailing window is
        skipped, so repeated scans do not spam. Concurrent scans may both send.
        Returns the number of reminders sent.
        """
        if window is None:
            window = timedelta(hours=settings.REMINDER_WINDOW_HOURS)
        now = now or utcnow()
        since = now - window

        pairs = await self.balances.list_outstanding()
        names = await self.users.get_users_by_ids(
            [p.user_a for p in pairs] + [p.user_b for p in pairs]
        )

        sent = 0
        reminded = set()
        for pair in pairs:
            debtor_id, creditor_id = pair.debtor_and_creditor()
            if debtor_id in reminded:
                continue
            if await self.notifications.has_recent(debtor_id, NotificationType.REMINDER, since):
                continue

            creditor = names.get(creditor_id)
            amount_cents = abs(pair.net_amount_cents)
            notification = await self.notifications.emit(
                debtor_id,
                NotificationType.REMINDER,
                reminder_message(creditor.name if creditor else UNKNOWN_USER_NAME, amount_cents),
                amount_cents=amount_cents,
            )
            if notification is not None:
                reminded.add(debtor_id)
                sent += 1

        logger.info("Reminder scan sent %d reminders for %d open balances", sent, len(pairs))
        return sent

    async def _user_name(self, user_id: str) -> str:
        try:
            user = await self.users.get_user_by_id(user_id)
        except PyMongoError:
            logger.exception("User lookup for %s failed while building notification text", user_id)
            return UNKNOWN_USER_NAME
        if user is None:
            logger.warning("User %s not found while building notification text", user_id)
            return UNKNOWN_USER_NAME
        return user.name
