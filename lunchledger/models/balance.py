"""
Balance model - net debt between exactly two users.

Design principles:
- One row per unordered pair, keyed by the canonically ordered (user_a, user_b)
- user_a < user_b under the string order of the identifiers
- net_amount_cents > 0 means user_a owes user_b; < 0 means user_b owes user_a
- Rows are created lazily and never deleted, zero means settled
- All amounts in integer cents
"""

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, Field, ConfigDict

from lunchledger.models.base import utcnow

# Smallest amount (in cents) that counts as an outstanding balance.
BALANCE_EPSILON_CENTS = 1


class BalancePair(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: Optional[str] = Field(default=None, validation_alias="_id", serialization_alias="_id")

    user_a: str
    user_b: str
    net_amount_cents: int = 0

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def is_settled(self) -> bool:
        return abs(self.net_amount_cents) < BALANCE_EPSILON_CENTS

    def debtor_and_creditor(self) -> Tuple[str, str]:
        """Return (debtor_id, creditor_id) for a non-zero balance."""
        if self.net_amount_cents > 0:
            return self.user_a, self.user_b
        return self.user_b, self.user_a

    def relative_to(self, user_id: str) -> int:
        """
        Signed amount from user_id's point of view.

        Positive = user_id owes the other user, negative = the other user owes user_id.
        """
        if user_id == self.user_a:
            return self.net_amount_cents
        if user_id == self.user_b:
            return -self.net_amount_cents
        raise ValueError(f"User {user_id} is not part of this balance")

    def other(self, user_id: str) -> str:
        return self.user_b if user_id == self.user_a else self.user_a
