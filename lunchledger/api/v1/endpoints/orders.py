from typing import List
from fastapi import APIRouter, Depends, status
from lunchledger.schemas.order import OrderCreate, OrderUpdate, OrderResponse, OrderSummaryResponse
from lunchledger.models.order import Order
from lunchledger.repositories.user_repo import UserRepository
from lunchledger.services.order_service import OrderService
from lunchledger.db.mongo import get_db

router = APIRouter()


def to_response(order: Order, user=None) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        date=order.date,
        user_id=order.user_id,
        user_name=user.name if user else "",
        user_avatar=user.avatar if user else "",
        food_item=order.food_item,
        created_at=order.created_at
    )


@router.get("/{date}", response_model=List[OrderResponse])
async def list_orders(date: str, db = Depends(get_db)):
    """Orders for a day, oldest first"""
    orders = await OrderService(db).list_by_date(date)
    users = await UserRepository(db).get_users_by_ids(o.user_id for o in orders)
    return [to_response(o, users.get(o.user_id)) for o in orders]

@router.get("/{date}/summary", response_model=OrderSummaryResponse)
async def order_summary(date: str, db = Depends(get_db)):
    """Grouped counts plus the copy and download texts"""
    return await OrderService(db).summary(date)

@router.post("/{date}", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def add_order(date: str, order_in: OrderCreate, db = Depends(get_db)):
    order = await OrderService(db).add(date, order_in.user_id, order_in.food_item)
    return to_response(order)

@router.patch("/item/{order_id}", response_model=OrderResponse)
async def update_order(order_id: str, order_in: OrderUpdate, db = Depends(get_db)):
    order = await OrderService(db).update(order_id, order_in.food_item)
    return to_response(order)

@router.delete("/item/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: str, db = Depends(get_db)):
    await OrderService(db).delete(order_id)
