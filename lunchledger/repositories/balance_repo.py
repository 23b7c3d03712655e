"""
BalanceRepository - the pairwise net-balance table.

Every mutation is a single atomic update on the pair's document:
- $inc on net_amount_cents, never read-then-write in application code
- upsert creates the row on the first adjustment between two users
- a unique (user_a, user_b) index backs the one-row-per-pair rule
"""

from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from lunchledger.models.balance import BalancePair, BALANCE_EPSILON_CENTS
from lunchledger.models.base import utcnow


def _to_pair(doc: dict) -> BalancePair:
    doc["_id"] = str(doc["_id"])
    return BalancePair(**doc)


class BalanceRepository:
    """Repository for canonical balance pairs."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["balances"]

    async def increment(self, user_a: str, user_b: str, adjustment_cents: int) -> BalancePair:
        """
        Atomically add adjustment_cents to the (user_a, user_b) row, creating it if missing.

        Callers must pass an already canonical pair. Two concurrent first-time
        upserts can collide on the unique index; the loser retries as a plain
        increment against the row the winner created.
        """
        now = utcnow()
        update = {
            "$inc": {"net_amount_cents": adjustment_cents},
            "$set": {"updated_at": now},
            "$setOnInsert": {"created_at": now},
        }
        query = {"user_a": user_a, "user_b": user_b}
        try:
            doc = await self.collection.find_one_and_update(
                query, update, upsert=True, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            del update["$setOnInsert"]
            doc = await self.collection.find_one_and_update(
                query, update, return_document=ReturnDocument.AFTER
            )
        return _to_pair(doc)

    async def increment_if_covered(
        self, user_a: str, user_b: str, adjustment_cents: int
    ) -> Optional[BalancePair]:
        """
        Apply a debt-reducing adjustment only if it does not cross zero.

        A negative adjustment requires net >= -adjustment (user_a owes enough);
        a positive one requires net <= -adjustment (user_b owes enough).
        The check and the increment are one conditional update. Returns None
        when the row is missing or the outstanding debt is too small.
        """
        if adjustment_cents < 0:
            condition = {"$gte": -adjustment_cents}
        else:
            condition = {"$lte": -adjustment_cents}

        doc = await self.collection.find_one_and_update(
            {"user_a": user_a, "user_b": user_b, "net_amount_cents": condition},
            {
                "$inc": {"net_amount_cents": adjustment_cents},
                "$set": {"updated_at": utcnow()},
            },
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return None
        return _to_pair(doc)

    async def get_pair(self, user_a: str, user_b: str) -> Optional[BalancePair]:
        doc = await self.collection.find_one({"user_a": user_a, "user_b": user_b})
        if doc:
            return _to_pair(doc)
        return None

    async def list_for_user(self, user_id: str) -> List[BalancePair]:
        """All pairs the user takes part in, settled ones included."""
        docs = await self.collection.find({
            "$or": [{"user_a": user_id}, {"user_b": user_id}]
        }).to_list(None)
        return [_to_pair(doc) for doc in docs]

    async def list_outstanding(self) -> List[BalancePair]:
        """All pairs with a non-zero balance."""
        docs = await self.collection.find({
            "$or": [
                {"net_amount_cents": {"$gte": BALANCE_EPSILON_CENTS}},
                {"net_amount_cents": {"$lte": -BALANCE_EPSILON_CENTS}},
            ]
        }).to_list(None)
        return [_to_pair(doc) for doc in docs]

    async def count(self) -> int:
        return await self.collection.count_documents({})
