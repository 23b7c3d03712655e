from datetime import datetime

from pydantic import Field

from lunchledger.models.base import MongoModel, utcnow


class User(MongoModel):
    """A participant, identified on login by case-insensitive name."""
    name: str
    name_lower: str
    avatar: str = "🙂"
    updated_at: datetime = Field(default_factory=utcnow)