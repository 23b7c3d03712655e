from fastapi import APIRouter, HTTPException, Depends
from lunchledger.schemas.notification import NotificationResponse, NotificationFeedResponse
from lunchledger.models.notification import Notification
from lunchledger.services.notification_service import NotificationService
from lunchledger.db.mongo import get_db

router = APIRouter()


def to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=str(notification.id),
        user_id=notification.user_id,
        type=notification.type.value,
        message=notification.message,
        amount_cents=notification.amount_cents,
        related_date=notification.related_date,
        is_read=notification.is_read,
        created_at=notification.created_at
    )


@router.get("/{user_id}", response_model=NotificationFeedResponse)
async def get_notifications(user_id: str, db = Depends(get_db)):
    """Latest notifications, newest first"""
    service = NotificationService(db)
    notifications = await service.list_for_user(user_id)
    return NotificationFeedResponse(
        notifications=[to_response(n) for n in notifications],
        unread_count=await service.count_unread(user_id)
    )

@router.post("/item/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: str, db = Depends(get_db)):
    notification = await NotificationService(db).mark_read(notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return to_response(notification)

@router.post("/{user_id}/read-all")
async def mark_all_read(user_id: str, db = Depends(get_db)):
    updated = await NotificationService(db).mark_all_read(user_id)
    return {"updated": updated}
