"""Tests for LedgerService."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from app.domain.errors import (
    InvalidAmountError,
    LedgerEntryNotFoundError,
    ManagedLedgerEntryError,
    OrderNotFoundError,
    TruckloadNotFoundError,
)
from app.domain.value_objects.enums import AppliesTo, AssignmentType, LedgerOrigin
from tests.conftest import TRUCKLOAD_A, TRUCKLOAD_B


@pytest.mark.asyncio
async def test_record_manual_adjustment(ledger_service):
    entry = await ledger_service.record_manual_adjustment(
        TRUCKLOAD_A, Decimal("75.5"), False, AppliesTo.DRIVER_PAY, "  toll  ",
        order_id=2, driver_name="Alice", action="toll", entry_date=date(2026, 3, 2),
    )

    assert entry.id is not None
    assert entry.amount == Decimal("75.50")
    assert entry.origin == LedgerOrigin.MANUAL
    assert entry.comment == "toll"
    assert entry.signed_amount == Decimal("-75.50")


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10"), "abc"])
async def test_invalid_adjustment_amount(ledger_service, amount):
    with pytest.raises(InvalidAmountError):
        await ledger_service.record_manual_adjustment(
            TRUCKLOAD_A, amount, True, AppliesTo.LOAD_VALUE, ""
        )


@pytest.mark.asyncio
async def test_adjustment_unknown_truckload(ledger_service):
    with pytest.raises(TruckloadNotFoundError):
        await ledger_service.record_manual_adjustment(
            404, Decimal("1"), True, AppliesTo.LOAD_VALUE, ""
        )


@pytest.mark.asyncio
async def test_adjustment_unknown_order(ledger_service):
    with pytest.raises(OrderNotFoundError):
        await ledger_service.record_manual_adjustment(
            TRUCKLOAD_A, Decimal("1"), True, AppliesTo.LOAD_VALUE, "", order_id=99
        )


@pytest.mark.asyncio
async def test_list_filters_by_origin(ledger_service, split_manager, store):
    await split_manager.define_split(1, Decimal("120.00"), AssignmentType.PICKUP)
    await store.create_assignment(1, TRUCKLOAD_A, AssignmentType.PICKUP)
    await store.create_assignment(1, TRUCKLOAD_B, AssignmentType.DELIVERY)
    await ledger_service.record_manual_adjustment(
        TRUCKLOAD_A, Decimal("10"), True, AppliesTo.DRIVER_PAY, "bonus"
    )

    everything = await ledger_service.list_for_truckload(TRUCKLOAD_A)
    manual = await ledger_service.list_for_truckload(TRUCKLOAD_A, LedgerOrigin.MANUAL)

    assert [e.origin for e in everything] == [LedgerOrigin.SPLIT_ALLOCATION, LedgerOrigin.MANUAL]
    assert [e.comment for e in manual] == ["bonus"]


@pytest.mark.asyncio
async def test_list_unknown_truckload_is_empty(ledger_service):
    assert await ledger_service.list_for_truckload(404) == []


@pytest.mark.asyncio
async def test_delete_manual_adjustment(ledger_service, repos):
    entry = await ledger_service.record_manual_adjustment(
        TRUCKLOAD_A, Decimal("10"), True, AppliesTo.DRIVER_PAY, "bonus"
    )
    deleted = await ledger_service.delete_manual_adjustment(entry.id)
    assert deleted.id == entry.id
    assert repos.ledger.rows == {}


@pytest.mark.asyncio
async def test_delete_missing_entry(ledger_service):
    with pytest.raises(LedgerEntryNotFoundError):
        await ledger_service.delete_manual_adjustment(12345)


@pytest.mark.asyncio
async def test_split_entries_are_not_deletable(ledger_service, split_manager, store, repos):
    await split_manager.define_split(1, Decimal("120.00"), AssignmentType.PICKUP)
    await store.create_assignment(1, TRUCKLOAD_A, AssignmentType.PICKUP)
    await store.create_assignment(1, TRUCKLOAD_B, AssignmentType.DELIVERY)
    entry_id = next(iter(repos.ledger.rows))

    with pytest.raises(ManagedLedgerEntryError):
        await ledger_service.delete_manual_adjustment(entry_id)
    assert len(repos.ledger.rows) == 2
