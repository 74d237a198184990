"""Pytest configuration, in-memory repositories and shared fixtures."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.ledger_repo import LedgerRepository
from app.application.ports.order_repo import OrderRepository
from app.application.ports.split_allocation_repo import SplitAllocationRepository
from app.application.ports.truckload_repo import TruckloadRepository
from app.application.use_cases.ledger import LedgerService
from app.application.use_cases.manage_assignments import AssignmentStore
from app.application.use_cases.project_order import OrderProjector
from app.application.use_cases.split_allocation import SplitAllocationManager
from app.domain.entities.order import Order
from app.domain.entities.truckload import Truckload
from app.domain.errors import DuplicateLegError

# ─── In-memory fakes ────────────────────────────────────────────────


class FakeOrderRepo(OrderRepository):
    def __init__(self, orders: list[Order]):
        self.orders = {o.id: o for o in orders}

    async def get_by_id(self, order_id):
        order = self.orders.get(order_id)
        return replace(order) if order else None

    async def get_for_update(self, order_id):
        return await self.get_by_id(order_id)

    async def update_projection(self, order_id, status, is_transfer_order):
        self.orders[order_id].status = status
        self.orders[order_id].is_transfer_order = is_transfer_order


class FakeTruckloadRepo(TruckloadRepository):
    def __init__(self, truckloads: list[Truckload]):
        self.truckloads = {t.id: t for t in truckloads}

    async def get_by_id(self, truckload_id):
        truckload = self.truckloads.get(truckload_id)
        return replace(truckload) if truckload else None

    async def get_for_update(self, truckload_id):
        return await self.get_by_id(truckload_id)

    async def delete(self, truckload_id):
        self.truckloads.pop(truckload_id, None)


class FakeAssignmentRepo(AssignmentRepository):
    """Enforces the one-leg-per-type rule in add(), like the unique constraint."""

    def __init__(self):
        self.rows: dict[int, object] = {}
        self._next_id = 1

    async def add(self, assignment):
        await asyncio.sleep(0)
        for row in self.rows.values():
            if (
                row.order_id == assignment.order_id
                and row.assignment_type == assignment.assignment_type
            ):
                raise DuplicateLegError(assignment.order_id, assignment.assignment_type.value)
        assignment.id = self._next_id
        self._next_id += 1
        self.rows[assignment.id] = replace(assignment)
        return assignment

    async def get_by_id(self, assignment_id):
        row = self.rows.get(assignment_id)
        return replace(row) if row else None

    async def get_by_order(self, order_id):
        await asyncio.sleep(0)
        return [replace(r) for r in self.rows.values() if r.order_id == order_id]

    async def get_by_order_and_type(self, order_id, assignment_type):
        # Yield so concurrent callers interleave between check and insert
        await asyncio.sleep(0)
        return next(
            (
                replace(r)
                for r in self.rows.values()
                if r.order_id == order_id and r.assignment_type == assignment_type
            ),
            None,
        )

    async def get_by_truckload(self, truckload_id):
        stops = [replace(r) for r in self.rows.values() if r.truckload_id == truckload_id]
        return sorted(stops, key=lambda a: (a.sequence_number, a.id))

    async def next_sequence_number(self, truckload_id):
        numbers = [r.sequence_number for r in self.rows.values() if r.truckload_id == truckload_id]
        return max(numbers, default=0) + 1

    async def delete(self, assignment_id):
        self.rows.pop(assignment_id, None)

    async def set_quote(self, assignment_id, quote):
        self.rows[assignment_id].assignment_quote = quote

    async def clear_quotes_for_order(self, order_id):
        for row in self.rows.values():
            if row.order_id == order_id:
                row.assignment_quote = None

    async def set_completed(self, assignment_id, completed):
        self.rows[assignment_id].is_completed = completed

    async def set_exclude_from_load_value(self, assignment_id, exclude):
        self.rows[assignment_id].exclude_from_load_value = exclude


class FakeSplitAllocationRepo(SplitAllocationRepository):
    def __init__(self):
        self.rows: dict[int, object] = {}
        self._next_id = 1

    async def get_by_order(self, order_id):
        return next((replace(r) for r in self.rows.values() if r.order_id == order_id), None)

    async def get_by_order_for_update(self, order_id):
        return await self.get_by_order(order_id)

    async def save(self, allocation):
        existing = await self.get_by_order(allocation.order_id)
        allocation.id = existing.id if existing else self._next_id
        if existing is None:
            self._next_id += 1
        self.rows[allocation.id] = replace(allocation)
        return allocation

    async def set_state(self, allocation_id, state):
        self.rows[allocation_id].state = state

    async def delete(self, allocation_id):
        self.rows.pop(allocation_id, None)


class FakeLedgerRepo(LedgerRepository):
    def __init__(self):
        self.rows: dict[int, object] = {}
        self._next_id = 1
        self._clock = datetime(2026, 1, 1, 8, 0)

    async def add(self, entry):
        entry.id = self._next_id
        self._next_id += 1
        self._clock += timedelta(seconds=1)
        entry.created_at = self._clock
        self.rows[entry.id] = replace(entry)
        return entry

    async def get_by_id(self, entry_id):
        row = self.rows.get(entry_id)
        return replace(row) if row else None

    async def get_by_truckload(self, truckload_id, origin=None):
        entries = [
            replace(r)
            for r in self.rows.values()
            if r.truckload_id == truckload_id and (origin is None or r.origin == origin)
        ]
        return sorted(entries, key=lambda e: (e.created_at, e.id))

    async def get_by_split_allocation(self, allocation_id):
        return [replace(r) for r in self.rows.values() if r.split_allocation_id == allocation_id]

    async def delete(self, entry_id):
        self.rows.pop(entry_id, None)

    async def delete_by_split_allocation(self, allocation_id):
        doomed = [i for i, r in self.rows.items() if r.split_allocation_id == allocation_id]
        for entry_id in doomed:
            del self.rows[entry_id]
        return len(doomed)

    async def delete_by_truckload(self, truckload_id):
        doomed = [i for i, r in self.rows.items() if r.truckload_id == truckload_id]
        for entry_id in doomed:
            del self.rows[entry_id]
        return len(doomed)


# ─── Fixtures ────────────────────────────────────────────────────────

TRUCKLOAD_A, TRUCKLOAD_B, TRUCKLOAD_C = 1, 2, 3


def make_orders() -> list[Order]:
    return [
        Order(
            id=1, freight_quote=Decimal("500.00"),
            pickup_customer_id=10, delivery_customer_id=20,
            pickup_customer_name="Acme Foods", delivery_customer_name="Beta Market",
        ),
        Order(
            id=2, freight_quote=Decimal("800.00"),
            pickup_customer_id=30, delivery_customer_id=None,
            pickup_customer_name="Gamma Steel",
        ),
    ]


def make_truckloads() -> list[Truckload]:
    return [
        Truckload(id=TRUCKLOAD_A, driver_name="Alice"),
        Truckload(id=TRUCKLOAD_B, driver_name="Bob"),
        Truckload(id=TRUCKLOAD_C, driver_name="Carol"),
    ]


@pytest.fixture
def repos():
    return SimpleNamespace(
        orders=FakeOrderRepo(make_orders()),
        truckloads=FakeTruckloadRepo(make_truckloads()),
        assignments=FakeAssignmentRepo(),
        splits=FakeSplitAllocationRepo(),
        ledger=FakeLedgerRepo(),
    )


@pytest.fixture
def projector(repos):
    return OrderProjector(repos.orders, repos.assignments)


@pytest.fixture
def split_manager(repos):
    return SplitAllocationManager(
        order_repo=repos.orders,
        truckload_repo=repos.truckloads,
        assignment_repo=repos.assignments,
        split_repo=repos.splits,
        ledger_repo=repos.ledger,
    )


@pytest.fixture
def store(repos, projector, split_manager):
    return AssignmentStore(
        order_repo=repos.orders,
        truckload_repo=repos.truckloads,
        assignment_repo=repos.assignments,
        ledger_repo=repos.ledger,
        projector=projector,
        split_manager=split_manager,
    )


@pytest.fixture
def ledger_service(repos):
    return LedgerService(
        ledger_repo=repos.ledger,
        truckload_repo=repos.truckloads,
        order_repo=repos.orders,
    )
