from fastapi import APIRouter, Depends
from lunchledger.schemas.balance import BalanceEntry, UserBalancesResponse
from lunchledger.repositories.user_repo import UserRepository
from lunchledger.services.ledger_service import LedgerService
from lunchledger.db.mongo import get_db

router = APIRouter()

@router.get("/{user_id}", response_model=UserBalancesResponse)
async def get_balances(user_id: str, db = Depends(get_db)):
    """Who the user owes and who owes the user"""
    balances = await LedgerService(db).get_balances_for_user(user_id)
    users = await UserRepository(db).get_users_by_ids(other for other, _ in balances)

    entries = []
    for other_id, amount_cents in balances:
        other = users.get(other_id)
        entries.append(BalanceEntry(
            user_id=other_id,
            user_name=other.name if other else "Unknown",
            user_avatar=other.avatar if other else "",
            amount_cents=amount_cents
        ))

    return UserBalancesResponse(
        user_id=user_id,
        balances=entries,
        you_owe_cents=sum(e.amount_cents for e in entries if e.amount_cents > 0),
        owed_to_you_cents=sum(-e.amount_cents for e in entries if e.amount_cents < 0)
    )
