from typing import Dict, Iterable, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from lunchledger.models.base import utcnow
from lunchledger.models.user import User
from lunchledger.utils.validation import InvalidArgumentError


class UserRepository:
    """User directory operations."""
    
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]
    
    async def find_or_create_by_name(self, name: str, avatar: str) -> User:
        """
        Return the user whose name matches case-insensitively, creating it if needed.

        A single upsert keyed on name_lower, so two first logins with the same
        name end up as one user. The avatar is only written on creation.
        """
        trimmed = name.strip()
        if not trimmed:
            raise InvalidArgumentError("Name is required")
        
        now = utcnow()
        doc = await self.collection.find_one_and_update(
            {"name_lower": trimmed.lower()},
            {"$setOnInsert": {
                "name": trimmed,
                "avatar": avatar,
                "created_at": now,
                "updated_at": now
            }},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        return User(**doc)
    
    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        if not ObjectId.is_valid(user_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(user_id)})
        if doc:
            return User(**doc)
        return None
    
    async def get_users_by_ids(self, user_ids: Iterable[str]) -> Dict[str, User]:
        """Resolve many ids at once, keyed by string id. Unknown ids are left out."""
        oids = [ObjectId(uid) for uid in set(user_ids) if ObjectId.is_valid(uid)]
        if not oids:
            return {}
        docs = await self.collection.find({"_id": {"$in": oids}}).to_list(None)
        return {str(doc["_id"]): User(**doc) for doc in docs}
    
    async def list_users(self) -> List[User]:
        docs = await self.collection.find({}).sort("name_lower", 1).to_list(None)
        return [User(**doc) for doc in docs]
