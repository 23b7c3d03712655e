from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from lunchledger.models.notification import Notification, NotificationType


class NotificationRepository:
    """Append-only notification feed, plus the read flag."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["notifications"]

    async def insert(self, notification: Notification) -> Notification:
        doc = notification.model_dump(by_alias=True)
        doc["type"] = notification.type.value
        await self.collection.insert_one(doc)
        return notification

    async def insert_many(self, notifications: List[Notification]) -> None:
        if not notifications:
            return
        docs = []
        for notification in notifications:
            doc = notification.model_dump(by_alias=True)
            doc["type"] = notification.type.value
            docs.append(doc)
        await self.collection.insert_many(docs)

    async def list_for_user(self, user_id: str, limit: int = 50) -> List[Notification]:
        """Newest first."""
        docs = await self.collection.find(
            {"user_id": user_id}
        ).sort("created_at", -1).limit(limit).to_list(None)
        return [Notification(**doc) for doc in docs]

    async def count_unread(self, user_id: str) -> int:
        return await self.collection.count_documents({"user_id": user_id, "is_read": False})

    async def mark_read(self, notification_id: str) -> Optional[Notification]:
        if not ObjectId.is_valid(notification_id):
            return None
        result = await self.collection.update_one(
            {"_id": ObjectId(notification_id)},
            {"$set": {"is_read": True}}
        )
        if result.matched_count == 0:
            return None
        doc = await self.collection.find_one({"_id": ObjectId(notification_id)})
        return Notification(**doc)

    async def mark_all_read(self, user_id: str) -> int:
        result = await self.collection.update_many(
            {"user_id": user_id, "is_read": False},
            {"$set": {"is_read": True}}
        )
        return result.modified_count

    async def exists_since(
        self, user_id: str, notification_type: NotificationType, since: datetime
    ) -> bool:
        """Whether user_id got a notification of this type at or after `since`."""
        doc = await self.collection.find_one({
            "user_id": user_id,
            "type": notification_type.value,
            "created_at": {"$gte": since}
        })
        return doc is not None
