from typing import List

from pydantic import BaseModel


class BalanceEntry(BaseModel):
    """One counterpart. Positive amount = you owe them, negative = they owe you."""
    user_id: str
    user_name: str
    user_avatar: str
    amount_cents: int


class UserBalancesResponse(BaseModel):
    user_id: str
    balances: List[BalanceEntry]
    you_owe_cents: int
    owed_to_you_cents: int
