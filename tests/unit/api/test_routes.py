"""HTTP layer tests: routing, serialization and error mapping over in-memory fakes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.adapters.persistence.database import get_session
from app.infrastructure.api.dependencies import (
    get_assignment_store,
    get_ledger_service,
    get_split_manager,
)
from app.main import app
from tests.conftest import TRUCKLOAD_A, TRUCKLOAD_B


class FakeSession:
    def __init__(self):
        self.commits = 0
        self.rollbacks = 0

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session, store, split_manager, ledger_service):
    async def _session():
        yield session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_assignment_store] = lambda: store
    app.dependency_overrides[get_split_manager] = lambda: split_manager
    app.dependency_overrides[get_ledger_service] = lambda: ledger_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _assign(client, order_id, truckload_id, leg):
    return client.post(
        "/api/assignments",
        json={"order_id": order_id, "truckload_id": truckload_id, "assignment_type": leg},
    )


def test_create_assignment(client, session):
    resp = _assign(client, 1, TRUCKLOAD_A, "pickup")

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["assignment"]["sequence_number"] == 1
    assert body["assignment"]["assignment_quote"] is None
    assert session.commits == 1


def test_duplicate_leg_is_conflict(client, session):
    _assign(client, 1, TRUCKLOAD_A, "pickup")
    resp = _assign(client, 1, TRUCKLOAD_B, "pickup")

    assert resp.status_code == 409
    assert resp.json() == {
        "success": False,
        "error": "duplicate_leg",
        "message": "Order 1 already has a pickup assignment",
    }
    assert session.rollbacks == 1


def test_unknown_truckload_is_not_found(client):
    resp = _assign(client, 1, 404, "delivery")
    assert resp.status_code == 404
    assert resp.json()["error"] == "truckload_not_found"


def test_bad_leg_name_rejected(client):
    resp = _assign(client, 1, TRUCKLOAD_A, "middle")
    assert resp.status_code == 422


def test_split_flow(client):
    resp = client.put(
        "/api/orders/1/split-load",
        json={"misc_amount": "120.00", "full_quote_leg": "pickup"},
    )
    assert resp.status_code == 200
    assert resp.json()["split_load"]["state"] == "pending"

    _assign(client, 1, TRUCKLOAD_A, "pickup")
    _assign(client, 1, TRUCKLOAD_B, "delivery")

    info = client.get("/api/orders/1/split-load").json()
    assert info["classification"] == "split_across_loads"
    assert info["split_load"]["state"] == "applied"
    assert info["pickup"]["assignment_quote"] == "380.00"
    assert info["delivery"]["assignment_quote"] == "120.00"

    ledger = client.get(f"/api/truckloads/{TRUCKLOAD_A}/ledger").json()
    assert ledger["total"] == 1
    assert ledger["net_amount"] == "-120.00"
    assert ledger["entries"][0]["origin"] == "split_allocation"

    split_loads = client.get(f"/api/truckloads/{TRUCKLOAD_B}/split-loads").json()
    assert split_loads["split_loads"][0]["other_truckload_id"] == TRUCKLOAD_A


def test_invalid_misc_amount(client):
    resp = client.put(
        "/api/orders/1/split-load",
        json={"misc_amount": "500.00", "full_quote_leg": "delivery"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "invalid_amount"


def test_transfer_order_split_conflict(client):
    _assign(client, 1, TRUCKLOAD_A, "pickup")
    _assign(client, 1, TRUCKLOAD_A, "delivery")

    resp = client.put(
        "/api/orders/1/split-load",
        json={"misc_amount": "100", "full_quote_leg": "pickup"},
    )
    assert resp.status_code == 409
    assert resp.json()["error"] == "transfer_order_cannot_split"


def test_clear_split(client):
    client.put("/api/orders/1/split-load", json={"misc_amount": "50", "full_quote_leg": "pickup"})

    assert client.delete("/api/orders/1/split-load").json() == {"success": True, "cleared": True}
    assert client.delete("/api/orders/1/split-load").json()["cleared"] is False


def test_unassign_and_complete(client):
    _assign(client, 1, TRUCKLOAD_A, "pickup")

    done = client.post("/api/assignments/1/pickup/complete").json()
    assert done["assignment"]["is_completed"] is True

    resp = client.delete("/api/assignments/1/pickup")
    assert resp.status_code == 200
    assert client.delete("/api/assignments/1/pickup").status_code == 404


def test_stops_and_exclude_toggle(client):
    created = _assign(client, 2, TRUCKLOAD_A, "pickup").json()["assignment"]

    resp = client.patch(
        f"/api/truckloads/{TRUCKLOAD_A}/assignments/{created['id']}",
        json={"exclude_from_load_value": True},
    )
    assert resp.json()["assignment"]["exclude_from_load_value"] is True

    stops = client.get(f"/api/truckloads/{TRUCKLOAD_A}/stops").json()
    assert stops["total"] == 1
    assert client.get("/api/truckloads/404/stops").status_code == 404


def test_order_assignments(client):
    _assign(client, 1, TRUCKLOAD_B, "delivery")
    _assign(client, 1, TRUCKLOAD_A, "pickup")

    legs = client.get("/api/orders/1/assignments").json()["assignments"]
    assert [leg["assignment_type"] for leg in legs] == ["pickup", "delivery"]


def test_manual_ledger_roundtrip(client):
    resp = client.post(
        f"/api/truckloads/{TRUCKLOAD_B}/ledger",
        json={"amount": "35", "is_addition": True, "comment": "lumper fee"},
    )
    assert resp.status_code == 201
    entry = resp.json()["entry"]
    assert entry["amount"] == "35.00"
    assert entry["origin"] == "manual"

    manual = client.get(f"/api/truckloads/{TRUCKLOAD_B}/ledger?origin=manual").json()
    assert manual["total"] == 1

    assert client.delete(f"/api/ledger/{entry['id']}").status_code == 200
    assert client.delete(f"/api/ledger/{entry['id']}").status_code == 404


def test_split_entry_delete_conflict(client):
    client.put("/api/orders/1/split-load", json={"misc_amount": "50", "full_quote_leg": "pickup"})
    _assign(client, 1, TRUCKLOAD_A, "pickup")
    _assign(client, 1, TRUCKLOAD_B, "delivery")
    entry_id = client.get(f"/api/truckloads/{TRUCKLOAD_A}/ledger").json()["entries"][0]["id"]

    resp = client.delete(f"/api/ledger/{entry_id}")
    assert resp.status_code == 409
    assert resp.json()["error"] == "managed_ledger_entry"


def test_delete_truckload(client):
    _assign(client, 1, TRUCKLOAD_B, "delivery")

    body = client.delete(f"/api/truckloads/{TRUCKLOAD_B}").json()
    assert body["deleted"] is True
    assert body["affected_order_ids"] == [1]
    assert client.delete(f"/api/truckloads/{TRUCKLOAD_B}").json()["deleted"] is False
