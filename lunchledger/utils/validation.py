"""Ledger errors and input validation."""
from typing import Iterable

from lunchledger.models.payment import SplitDetail


class LedgerError(Exception):
    """Base class for errors raised by the ledger and its workflows."""
    pass


class InvalidArgumentError(LedgerError):
    """Raised when an operation is called with arguments it cannot accept."""
    pass


class NotFoundError(LedgerError):
    """Raised when a referenced user, order or notification does not exist."""
    pass


class ConflictError(LedgerError):
    """Raised when an operation would violate a uniqueness rule."""
    pass


class RollbackIncompleteError(LedgerError):
    """
    Raised when a failed split could not be fully reversed.

    The storage error that started the rollback is chained as __cause__;
    unreversed holds the shares whose adjustment is still applied.
    """

    def __init__(self, message: str, unreversed=()):
        super().__init__(message)
        self.unreversed = list(unreversed)


def validate_positive_amount(amount_cents: int, what: str = "Amount") -> None:
    if amount_cents <= 0:
        raise InvalidArgumentError(f"{what} must be positive, got {amount_cents}")


def validate_shares(total_cents: int, shares: Iterable[SplitDetail]) -> None:
    """
    Validate a bill split.

    Rules:
    - total must be positive
    - every share must be non-negative
    - a user may appear at most once
    - shares may not add up to more than the total (the payer's own share may be omitted)
    """
    validate_positive_amount(total_cents, "Bill total")

    seen = set()
    share_sum = 0
    for share in shares:
        if share.amount_cents < 0:
            raise InvalidArgumentError(
                f"Share for user {share.user_id} is negative: {share.amount_cents}"
            )
        if share.user_id in seen:
            raise InvalidArgumentError(f"User {share.user_id} appears twice in the split")
        seen.add(share.user_id)
        share_sum += share.amount_cents

    if share_sum > total_cents:
        raise InvalidArgumentError(
            f"Shares add up to {share_sum}, more than the bill total {total_cents}"
        )


def validate_food_item(food_item: str) -> str:
    trimmed = food_item.strip()
    if not trimmed:
        raise InvalidArgumentError("Food item is required")
    return trimmed
