from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from lunchledger.models.payment import DayPayment
from lunchledger.utils.validation import ConflictError


class PaymentRepository:
    """One bill payment per day."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["day_payments"]

    async def insert(self, payment: DayPayment) -> DayPayment:
        """Insert a day's payment. Raises ConflictError if the day is already paid."""
        try:
            await self.collection.insert_one(payment.model_dump(by_alias=True))
        except DuplicateKeyError as e:
            raise ConflictError(f"The bill for {payment.date} is already paid") from e
        return payment

    async def get_by_date(self, date: str) -> Optional[DayPayment]:
        doc = await self.collection.find_one({"date": date})
        if doc:
            return DayPayment(**doc)
        return None

    async def delete(self, payment: DayPayment) -> None:
        await self.collection.delete_one({"_id": payment.id})
