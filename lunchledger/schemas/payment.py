from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from lunchledger.models.payment import SplitDetail


class SplitBillRequest(BaseModel):
    paid_by: str
    total_amount_cents: int = Field(..., gt=0)
    splits: List[SplitDetail]


class DayPaymentResponse(BaseModel):
    id: str
    date: str
    paid_by: str
    total_amount_cents: int
    splits: List[SplitDetail]
    created_at: datetime
