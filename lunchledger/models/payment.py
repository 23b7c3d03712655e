from typing import List

from pydantic import BaseModel

from lunchledger.models.base import MongoModel


class SplitDetail(BaseModel):
    user_id: str
    amount_cents: int


class DayPayment(MongoModel):
    """The single payer of a day's bill and how the bill was shared."""
    date: str
    paid_by: str
    total_amount_cents: int
    splits: List[SplitDetail] = []
