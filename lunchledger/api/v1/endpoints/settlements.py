from typing import List
from fastapi import APIRouter, HTTPException, Depends, status
from lunchledger.schemas.settlement import SettlementCreate, SettlementResponse, SettlementRecord
from lunchledger.repositories.settlement_repo import SettlementRepository
from lunchledger.repositories.user_repo import UserRepository
from lunchledger.services.ledger_service import LedgerService
from lunchledger.db.mongo import get_db

router = APIRouter()

@router.post("/", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def create_settlement(settlement_in: SettlementCreate, db = Depends(get_db)):
    users = await UserRepository(db).get_users_by_ids(
        [settlement_in.from_user_id, settlement_in.to_user_id]
    )
    for user_id in (settlement_in.from_user_id, settlement_in.to_user_id):
        if user_id not in users:
            raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    pair = await LedgerService(db).record_settlement(
        settlement_in.from_user_id, settlement_in.to_user_id, settlement_in.amount_cents
    )
    return SettlementResponse(
        from_user_id=settlement_in.from_user_id,
        to_user_id=settlement_in.to_user_id,
        amount_cents=settlement_in.amount_cents,
        remaining_cents=pair.relative_to(settlement_in.from_user_id)
    )

@router.get("/{user_id}", response_model=List[SettlementRecord])
async def list_settlements(user_id: str, db = Depends(get_db)):
    """Settlements the user paid or received, newest first"""
    settlements = await SettlementRepository(db).list_for_user(user_id)
    return [
        SettlementRecord(
            id=str(s.id),
            from_user_id=s.from_user_id,
            to_user_id=s.to_user_id,
            amount_cents=s.amount_cents,
            created_at=s.created_at
        )
        for s in settlements
    ]
