from datetime import datetime
from pydantic import BaseModel, Field

class SettlementCreate(BaseModel):
    from_user_id: str
    to_user_id: str
    amount_cents: int = Field(..., gt=0)

class SettlementResponse(BaseModel):
    from_user_id: str
    to_user_id: str
    amount_cents: int
    # Remaining balance from from_user_id's side: positive = still owes
    remaining_cents: int

class SettlementRecord(BaseModel):
    id: str
    from_user_id: str
    to_user_id: str
    amount_cents: int
    created_at: datetime
