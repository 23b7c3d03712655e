from fastapi import APIRouter, Depends
from lunchledger.schemas.notification import ReminderScanResponse
from lunchledger.services.ledger_service import LedgerService
from lunchledger.db.mongo import get_db

router = APIRouter()

@router.post("/scan", response_model=ReminderScanResponse)
async def scan_and_remind(db = Depends(get_db)):
    """Nudge every debtor with an open balance, at most once per reminder window"""
    sent = await LedgerService(db).scan_and_remind()
    return ReminderScanResponse(sent=sent)
