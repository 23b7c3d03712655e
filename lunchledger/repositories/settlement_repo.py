from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase

from lunchledger.models.settlement import Settlement


class SettlementRepository:
    """Append-only log of settlements between two users."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["settlements"]

    async def insert(self, settlement: Settlement) -> Settlement:
        await self.collection.insert_one(settlement.model_dump(by_alias=True))
        return settlement

    async def list_for_user(self, user_id: str) -> List[Settlement]:
        docs = await self.collection.find({
            "$or": [{"from_user_id": user_id}, {"to_user_id": user_id}]
        }).sort("created_at", -1).to_list(None)
        return [Settlement(**doc) for doc in docs]
