from fastapi import APIRouter, HTTPException, Depends, status
from lunchledger.schemas.payment import SplitBillRequest, DayPaymentResponse
from lunchledger.models.payment import DayPayment
from lunchledger.services.payment_service import PaymentService
from lunchledger.db.mongo import get_db

router = APIRouter()


def to_response(payment: DayPayment) -> DayPaymentResponse:
    return DayPaymentResponse(
        id=str(payment.id),
        date=payment.date,
        paid_by=payment.paid_by,
        total_amount_cents=payment.total_amount_cents,
        splits=payment.splits,
        created_at=payment.created_at
    )


@router.get("/{date}", response_model=DayPaymentResponse)
async def get_payment(date: str, db = Depends(get_db)):
    payment = await PaymentService(db).get(date)
    if not payment:
        raise HTTPException(status_code=404, detail="Nobody has paid for this day yet")
    return to_response(payment)

@router.post("/{date}", response_model=DayPaymentResponse, status_code=status.HTTP_201_CREATED)
async def split_bill(date: str, request: SplitBillRequest, db = Depends(get_db)):
    """Record the day's payer and split the bill across the participants"""
    payment = await PaymentService(db).split_bill(
        date, request.paid_by, request.total_amount_cents, request.splits
    )
    return to_response(payment)
