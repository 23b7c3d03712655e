from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from lunchledger.models.base import utcnow
from lunchledger.models.order import Order


class OrderRepository:
    """Per-day food orders."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["orders"]

    async def add(self, date: str, user_id: str, food_item: str) -> Order:
        order = Order(date=date, user_id=user_id, food_item=food_item)
        await self.collection.insert_one(order.model_dump(by_alias=True))
        return order

    async def list_by_date(self, date: str) -> List[Order]:
        """Orders for a day in the order they were placed."""
        docs = await self.collection.find({"date": date}).sort("created_at", 1).to_list(None)
        return [Order(**doc) for doc in docs]

    async def update_item(self, order_id: str, food_item: str) -> Optional[Order]:
        if not ObjectId.is_valid(order_id):
            return None
        doc = await self.collection.find_one_and_update(
            {"_id": ObjectId(order_id)},
            {"$set": {"food_item": food_item, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )
        if doc:
            return Order(**doc)
        return None

    async def delete(self, order_id: str) -> bool:
        if not ObjectId.is_valid(order_id):
            return False
        result = await self.collection.delete_one({"_id": ObjectId(order_id)})
        return result.deleted_count > 0
