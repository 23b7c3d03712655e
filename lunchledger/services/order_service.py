from collections import OrderedDict
from typing import Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from lunchledger.models.order import Order
from lunchledger.repositories.order_repo import OrderRepository
from lunchledger.repositories.user_repo import UserRepository
from lunchledger.utils.validation import NotFoundError, validate_food_item


def group_orders(orders: List[Order]) -> Dict[str, int]:
    """Count orders per item, ignoring case and surrounding whitespace. Keeps first-seen order."""
    grouped: Dict[str, int] = OrderedDict()
    for order in orders:
        key = order.food_item.strip().lower()
        grouped[key] = grouped.get(key, 0) + 1
    return grouped


def _summary_lines(grouped: Dict[str, int]) -> List[str]:
    lines = []
    for item, count in grouped.items():
        display = item[:1].upper() + item[1:]
        lines.append(f"{display} *{count}" if count > 1 else display)
    return lines


def copy_message(orders: List[Order]) -> str:
    """Text to paste into a chat with the restaurant."""
    return "\n".join(["Today's Order:", ""] + _summary_lines(group_orders(orders)))


def download_content(date: str, orders: List[Order], names: Dict[str, str]) -> str:
    """Per-person list followed by the grouped summary."""
    lines = [f"Date: {date}", ""]
    for order in orders:
        lines.append(f"{names.get(order.user_id, 'Unknown')} - {order.food_item}")
    lines += ["", "Grouped Summary:", ""]
    lines += _summary_lines(group_orders(orders))
    return "\n".join(lines)


class OrderService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.orders = OrderRepository(db)
        self.users = UserRepository(db)

    async def add(self, date: str, user_id: str, food_item: str) -> Order:
        food_item = validate_food_item(food_item)
        if await self.users.get_user_by_id(user_id) is None:
            raise NotFoundError(f"User {user_id} not found")
        return await self.orders.add(date, user_id, food_item)

    async def update(self, order_id: str, food_item: str) -> Order:
        order = await self.orders.update_item(order_id, validate_food_item(food_item))
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    async def delete(self, order_id: str) -> None:
        if not await self.orders.delete(order_id):
            raise NotFoundError(f"Order {order_id} not found")

    async def list_by_date(self, date: str) -> List[Order]:
        return await self.orders.list_by_date(date)

    async def summary(self, date: str) -> dict:
        orders = await self.orders.list_by_date(date)
        users = await self.users.get_users_by_ids(o.user_id for o in orders)
        names = {uid: user.name for uid, user in users.items()}
        return {
            "date": date,
            "grouped": group_orders(orders),
            "copy_text": copy_message(orders),
            "download_text": download_content(date, orders, names),
        }
