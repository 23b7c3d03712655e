import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from lunchledger.core.config import settings

logger = logging.getLogger(__name__)


class MongoDatabase:
    """MongoDB connection manager."""
    
    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]
    
    await create_indexes(mongodb.db)
    logger.info("Connected to MongoDB: %s", settings.DATABASE_NAME)

async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes(db: AsyncIOMotorDatabase):
    """Create database indexes."""
    # Case-insensitive unique user names
    await db["users"].create_index("name_lower", unique=True)
    
    # One balance row per canonical pair
    await db["balances"].create_index(
        [("user_a", ASCENDING), ("user_b", ASCENDING)], unique=True
    )
    await db["balances"].create_index("user_b")
    
    # Notifications: per-user feed and reminder lookups
    await db["notifications"].create_index(
        [("user_id", ASCENDING), ("created_at", DESCENDING)]
    )
    await db["notifications"].create_index(
        [("user_id", ASCENDING), ("type", ASCENDING), ("created_at", DESCENDING)]
    )
    
    # Orders and day payments
    await db["orders"].create_index([("date", ASCENDING), ("created_at", ASCENDING)])
    await db["day_payments"].create_index("date", unique=True)
    
    await db["settlements"].create_index([("from_user_id", ASCENDING), ("to_user_id", ASCENDING)])

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
