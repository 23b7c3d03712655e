import pytest
from bson import ObjectId

from lunchledger.models.order import Order
from lunchledger.services.order_service import OrderService, copy_message, download_content, group_orders
from lunchledger.utils.validation import InvalidArgumentError, NotFoundError

DAY = "2026-10-19"


def make_orders(*items):
    return [Order(date=DAY, user_id=f"u{i}", food_item=item) for i, item in enumerate(items)]


def test_group_orders_normalizes_items():
    grouped = group_orders(make_orders("Paneer Roll", " paneer roll ", "Dosa"))

    assert grouped == {"paneer roll": 2, "dosa": 1}
    assert list(grouped) == ["paneer roll", "dosa"]


def test_copy_message():
    text = copy_message(make_orders("paneer roll", "Paneer Roll", "dosa"))

    assert text == "Today's Order:\n\nPaneer roll *2\nDosa"


def test_download_content():
    orders = make_orders("Dosa", "dosa")
    text = download_content(DAY, orders, {"u0": "Alice"})

    assert text.splitlines() == [
        f"Date: {DAY}",
        "",
        "Alice - Dosa",
        "Unknown - dosa",
        "",
        "Grouped Summary:",
        "",
        "Dosa *2",
    ]


@pytest.mark.asyncio
async def test_add_list_update_delete(mock_db, users):
    service = OrderService(mock_db)
    alice_id = str(users["alice"].id)

    order = await service.add(DAY, alice_id, "  Masala Dosa ")
    assert order.food_item == "Masala Dosa"
    assert [o.id for o in await service.list_by_date(DAY)] == [order.id]
    assert await service.list_by_date("2026-10-20") == []

    updated = await service.update(str(order.id), "Idli")
    assert updated.food_item == "Idli"

    await service.delete(str(order.id))
    assert await service.list_by_date(DAY) == []


@pytest.mark.asyncio
async def test_add_rejects_blank_item_and_unknown_user(mock_db, users):
    service = OrderService(mock_db)

    with pytest.raises(InvalidArgumentError):
        await service.add(DAY, str(users["alice"].id), "   ")
    with pytest.raises(NotFoundError):
        await service.add(DAY, str(ObjectId()), "Dosa")


@pytest.mark.asyncio
async def test_update_and_delete_unknown_order(mock_db):
    service = OrderService(mock_db)

    with pytest.raises(NotFoundError):
        await service.update(str(ObjectId()), "Dosa")
    with pytest.raises(NotFoundError):
        await service.delete("not-an-id")


@pytest.mark.asyncio
async def test_summary_uses_user_names(mock_db, users):
    service = OrderService(mock_db)
    await service.add(DAY, str(users["alice"].id), "Dosa")
    await service.add(DAY, str(users["bob"].id), "dosa")

    summary = await service.summary(DAY)

    assert summary["grouped"] == {"dosa": 2}
    assert "Alice - Dosa" in summary["download_text"]
    assert "Bob - dosa" in summary["download_text"]
    assert summary["copy_text"].endswith("Dosa *2")
