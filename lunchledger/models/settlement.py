from lunchledger.models.base import MongoModel

class Settlement(MongoModel):
    from_user_id: str
    to_user_id: str
    amount_cents: int
