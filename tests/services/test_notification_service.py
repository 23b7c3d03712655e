from unittest.mock import AsyncMock, patch

import pytest
from pymongo.errors import AutoReconnect

from lunchledger.models.notification import NotificationType
from lunchledger.services.notification_service import (
    NotificationService,
    bill_split_message,
    format_amount,
    reminder_message,
    settlement_message,
)


def test_format_amount():
    assert format_amount(10000) == "₹100"
    assert format_amount(-2550) == "₹25.50"
    assert format_amount(5) == "₹0.05"


def test_messages_name_people_and_amounts():
    assert bill_split_message("Charlie", 30000, 10000, "2026-10-19") == (
        "Charlie paid ₹300 for 2026-10-19 🍕 you owe ₹100"
    )
    assert "for" not in bill_split_message("Charlie", 30000, 10000, None)
    assert settlement_message("Alice", 10000) == "Alice paid you ₹100 💸 debt cleared"
    assert "₹15 to Charlie" in reminder_message("Charlie", 1500)


@pytest.mark.asyncio
async def test_emit_stores_notification(mock_db):
    service = NotificationService(mock_db)

    notification = await service.emit(
        "u1", NotificationType.BILL_SPLIT, "hello", amount_cents=100, related_date="2026-10-19"
    )

    feed = await service.list_for_user("u1")
    assert [n.id for n in feed] == [notification.id]
    assert feed[0].is_read is False
    assert await service.count_unread("u1") == 1


@pytest.mark.asyncio
async def test_emit_failure_is_logged_not_raised(mock_db, caplog):
    service = NotificationService(mock_db)

    with patch.object(service.repo, "insert", new=AsyncMock(side_effect=AutoReconnect("down"))):
        result = await service.emit("u1", NotificationType.REMINDER, "pay up")

    assert result is None
    assert "Failed to insert REMINDER notification" in caplog.text


@pytest.mark.asyncio
async def test_emit_many_failure_returns_zero(mock_db):
    service = NotificationService(mock_db)

    with patch.object(service.repo, "insert_many", new=AsyncMock(side_effect=AutoReconnect("down"))):
        assert await service.emit_many([]) == 0
