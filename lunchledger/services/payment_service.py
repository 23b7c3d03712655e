import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from lunchledger.models.payment import DayPayment, SplitDetail
from lunchledger.repositories.payment_repo import PaymentRepository
from lunchledger.repositories.user_repo import UserRepository
from lunchledger.services.ledger_service import LedgerService
from lunchledger.utils.validation import NotFoundError, RollbackIncompleteError, validate_shares

logger = logging.getLogger(__name__)


class PaymentService:
    """Record who paid a day's bill and split it through the ledger."""

    def __init__(self, db: AsyncIOMotorDatabase, ledger: Optional[LedgerService] = None):
        self.payments = PaymentRepository(db)
        self.users = UserRepository(db)
        self.ledger = ledger or LedgerService(db)

    async def get(self, date: str) -> Optional[DayPayment]:
        return await self.payments.get_by_date(date)

    async def split_bill(
        self, date: str, paid_by: str, total_amount_cents: int, splits: List[SplitDetail]
    ) -> DayPayment:
        """
        Store the day's payment, then apply the split to the balances.

        If the balance update fails and is fully rolled back the payment
        record is removed again so the day can be retried. When the rollback
        is incomplete the record stays, so a retry cannot charge the day twice.
        """
        validate_shares(total_amount_cents, splits)

        user_ids = {paid_by} | {s.user_id for s in splits}
        known = await self.users.get_users_by_ids(user_ids)
        missing = sorted(user_ids - set(known))
        if missing:
            raise NotFoundError(f"Unknown users: {', '.join(missing)}")

        payment = await self.payments.insert(DayPayment(
            date=date,
            paid_by=paid_by,
            total_amount_cents=total_amount_cents,
            splits=splits,
        ))

        try:
            await self.ledger.record_split(paid_by, total_amount_cents, splits, related_date=date)
        except RollbackIncompleteError:
            logger.error("Balance update for %s was not fully reversed, keeping day payment", date)
            raise
        except Exception:
            logger.error("Balance update for %s failed, removing day payment", date)
            await self.payments.delete(payment)
            raise

        return payment
