from datetime import datetime

from pydantic import Field

from lunchledger.models.base import MongoModel, utcnow


class Order(MongoModel):
    """One user's food item for a given day."""
    date: str
    user_id: str
    food_item: str
    updated_at: datetime = Field(default_factory=utcnow)
