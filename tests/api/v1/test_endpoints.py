"""End-to-end flows through the HTTP API."""
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient
from pymongo.errors import AutoReconnect

from lunchledger.main import app
from lunchledger.utils.validation import RollbackIncompleteError

API = "/api/v1"
DAY = "2026-10-19"


def login(client, name, avatar="🙂"):
    response = client.post(f"{API}/users/login", json={"name": name, "avatar": avatar})
    assert response.status_code == 200
    return response.json()


def test_root(test_client):
    assert test_client.get("/").json() == {"message": "Welcome to Lunch Ledger API"}


def test_login_find_or_create(test_client):
    first = login(test_client, "Alice", "🦊")
    again = login(test_client, "alice", "🐸")

    assert again["id"] == first["id"]
    assert again["avatar"] == "🦊"
    assert test_client.get(f"{API}/users/{first['id']}").json()["name"] == "Alice"
    assert test_client.get(f"{API}/users/000000000000000000000000").status_code == 404
    assert len(test_client.get(f"{API}/users/").json()) == 1


def test_login_requires_name(test_client):
    response = test_client.post(f"{API}/users/login", json={"name": "  ", "avatar": "🙂"})
    assert response.status_code == 400


def test_orders_flow(test_client):
    alice = login(test_client, "Alice")
    bob = login(test_client, "Bob")

    created = test_client.post(f"{API}/orders/{DAY}", json={"user_id": alice["id"], "food_item": "Dosa"})
    assert created.status_code == 201
    test_client.post(f"{API}/orders/{DAY}", json={"user_id": bob["id"], "food_item": " dosa "})

    orders = test_client.get(f"{API}/orders/{DAY}").json()
    assert [o["user_name"] for o in orders] == ["Alice", "Bob"]
    assert orders[1]["food_item"] == "dosa"

    summary = test_client.get(f"{API}/orders/{DAY}/summary").json()
    assert summary["grouped"] == {"dosa": 2}
    assert summary["copy_text"] == "Today's Order:\n\nDosa *2"

    order_id = created.json()["id"]
    updated = test_client.patch(f"{API}/orders/item/{order_id}", json={"food_item": "Idli"})
    assert updated.json()["food_item"] == "Idli"
    assert test_client.delete(f"{API}/orders/item/{order_id}").status_code == 204
    assert test_client.delete(f"{API}/orders/item/{order_id}").status_code == 404


def test_split_settle_and_notifications(test_client):
    alice = login(test_client, "Alice")
    bob = login(test_client, "Bob")
    charlie = login(test_client, "Charlie")

    response = test_client.post(f"{API}/payments/{DAY}", json={
        "paid_by": charlie["id"],
        "total_amount_cents": 30000,
        "splits": [
            {"user_id": alice["id"], "amount_cents": 10000},
            {"user_id": bob["id"], "amount_cents": 10000},
            {"user_id": charlie["id"], "amount_cents": 10000},
        ],
    })
    assert response.status_code == 201
    assert test_client.get(f"{API}/payments/{DAY}").json()["paid_by"] == charlie["id"]

    balances = test_client.get(f"{API}/balances/{alice['id']}").json()
    assert balances["you_owe_cents"] == 10000
    assert balances["balances"] == [{
        "user_id": charlie["id"],
        "user_name": "Charlie",
        "user_avatar": "🙂",
        "amount_cents": 10000,
    }]
    charlie_view = test_client.get(f"{API}/balances/{charlie['id']}").json()
    assert charlie_view["owed_to_you_cents"] == 20000

    settle = test_client.post(f"{API}/settlements/", json={
        "from_user_id": alice["id"], "to_user_id": charlie["id"], "amount_cents": 10000
    })
    assert settle.status_code == 201
    assert settle.json()["remaining_cents"] == 0
    assert test_client.get(f"{API}/balances/{alice['id']}").json()["balances"] == []

    history = test_client.get(f"{API}/settlements/{charlie['id']}").json()
    assert [(s["from_user_id"], s["amount_cents"]) for s in history] == [(alice["id"], 10000)]

    feed = test_client.get(f"{API}/notifications/{charlie['id']}").json()
    assert [n["type"] for n in feed["notifications"]] == ["PAYMENT_SETTLED"]
    assert feed["unread_count"] == 1

    alice_feed = test_client.get(f"{API}/notifications/{alice['id']}").json()
    assert alice_feed["notifications"][0]["type"] == "BILL_SPLIT"
    note_id = alice_feed["notifications"][0]["id"]
    assert test_client.post(f"{API}/notifications/item/{note_id}/read").json()["is_read"] is True
    assert test_client.post(f"{API}/notifications/{charlie['id']}/read-all").json() == {"updated": 1}


def test_day_can_only_be_paid_once(test_client):
    alice = login(test_client, "Alice")
    bob = login(test_client, "Bob")
    body = {
        "paid_by": alice["id"],
        "total_amount_cents": 500,
        "splits": [{"user_id": bob["id"], "amount_cents": 500}],
    }

    assert test_client.post(f"{API}/payments/{DAY}", json=body).status_code == 201
    assert test_client.post(f"{API}/payments/{DAY}", json=body).status_code == 409
    assert test_client.get(f"{API}/payments/2026-10-20").status_code == 404


def test_settlement_validation(test_client):
    alice = login(test_client, "Alice")
    bob = login(test_client, "Bob")

    negative = test_client.post(f"{API}/settlements/", json={
        "from_user_id": alice["id"], "to_user_id": bob["id"], "amount_cents": -5
    })
    assert negative.status_code == 422

    too_much = test_client.post(f"{API}/settlements/", json={
        "from_user_id": alice["id"], "to_user_id": bob["id"], "amount_cents": 100
    })
    assert too_much.status_code == 400

    unknown = test_client.post(f"{API}/settlements/", json={
        "from_user_id": alice["id"], "to_user_id": "000000000000000000000000", "amount_cents": 100
    })
    assert unknown.status_code == 404


def test_reminder_scan_endpoint(test_client):
    alice = login(test_client, "Alice")
    bob = login(test_client, "Bob")
    test_client.post(f"{API}/payments/{DAY}", json={
        "paid_by": bob["id"],
        "total_amount_cents": 800,
        "splits": [{"user_id": alice["id"], "amount_cents": 800}],
    })

    assert test_client.post(f"{API}/reminders/scan").json() == {"sent": 1}
    assert test_client.post(f"{API}/reminders/scan").json() == {"sent": 0}


def test_storage_failure_returns_503(test_client):
    alice = login(test_client, "Alice")

    with patch(
        "lunchledger.api.v1.endpoints.balances.LedgerService.get_balances_for_user",
        new=AsyncMock(side_effect=AutoReconnect("down")),
    ):
        response = test_client.get(f"{API}/balances/{alice['id']}")

    assert response.status_code == 503


def test_incomplete_split_rollback_returns_503(test_client):
    alice = login(test_client, "Alice")
    charlie = login(test_client, "Charlie")

    with patch(
        "lunchledger.services.payment_service.LedgerService.record_split",
        new=AsyncMock(side_effect=RollbackIncompleteError("left 1 adjustment(s) applied")),
    ):
        response = test_client.post(f"{API}/payments/{DAY}", json={
            "paid_by": charlie["id"],
            "total_amount_cents": 1000,
            "splits": [{"user_id": alice["id"], "amount_cents": 1000}],
        })

    assert response.status_code == 503
    assert test_client.get(f"{API}/payments/{DAY}").status_code == 200


def test_lifespan_opens_and_closes_database():
    with patch("lunchledger.main.connect_to_mongo", new=AsyncMock()) as connect, \
            patch("lunchledger.main.close_mongo_connection", new=AsyncMock()) as close:
        with TestClient(app) as client:
            connect.assert_awaited_once()
            close.assert_not_awaited()
            assert client.get("/").status_code == 200
        close.assert_awaited_once()
