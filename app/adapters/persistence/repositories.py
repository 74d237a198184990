"""SQLAlchemy repository implementations."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.models import (
    AssignmentModel,
    LedgerEntryModel,
    OrderModel,
    SplitAllocationModel,
    TruckloadModel,
)
from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.ledger_repo import LedgerRepository
from app.application.ports.order_repo import OrderRepository
from app.application.ports.split_allocation_repo import SplitAllocationRepository
from app.application.ports.truckload_repo import TruckloadRepository
from app.domain.entities.assignment import Assignment
from app.domain.entities.ledger_entry import LedgerEntry
from app.domain.entities.order import Order
from app.domain.entities.split_allocation import SplitAllocation
from app.domain.entities.truckload import Truckload
from app.domain.errors import DuplicateLegError
from app.domain.value_objects.enums import (
    AppliesTo,
    AssignmentType,
    LedgerOrigin,
    OrderStatus,
    SplitState,
)

UNIQUE_LEG_CONSTRAINT = "uq_assignments_order_leg"

# ─── Mappers ─────────────────────────────────────────────────────────


def _order_to_domain(m: OrderModel) -> Order:
    return Order(
        id=m.id,
        freight_quote=m.freight_quote if m.freight_quote is not None else Decimal("0.00"),
        pickup_customer_id=m.pickup_customer_id,
        delivery_customer_id=m.delivery_customer_id,
        status=OrderStatus(m.status),
        is_transfer_order=m.is_transfer_order,
        pickup_customer_name=m.pickup_customer.customer_name if m.pickup_customer else None,
        delivery_customer_name=(
            m.delivery_customer.customer_name if m.delivery_customer else None
        ),
    )


def _truckload_to_domain(m: TruckloadModel) -> Truckload:
    return Truckload(
        id=m.id,
        driver_name=m.driver_name,
        start_date=m.start_date,
        end_date=m.end_date,
        is_completed=m.is_completed,
    )


def _assignment_to_domain(m: AssignmentModel) -> Assignment:
    return Assignment(
        id=m.id,
        order_id=m.order_id,
        truckload_id=m.truckload_id,
        assignment_type=AssignmentType(m.assignment_type),
        sequence_number=m.sequence_number,
        assignment_quote=m.assignment_quote,
        is_completed=m.is_completed,
        exclude_from_load_value=m.exclude_from_load_value,
    )


def _split_to_domain(m: SplitAllocationModel) -> SplitAllocation:
    return SplitAllocation(
        id=m.id,
        order_id=m.order_id,
        misc_amount=m.misc_amount,
        full_quote_leg=AssignmentType(m.full_quote_leg),
        full_quote_applies_to=AppliesTo(m.full_quote_applies_to),
        misc_applies_to=AppliesTo(m.misc_applies_to),
        state=SplitState(m.state),
    )


def _ledger_to_domain(m: LedgerEntryModel) -> LedgerEntry:
    return LedgerEntry(
        id=m.id,
        truckload_id=m.truckload_id,
        order_id=m.order_id,
        amount=m.amount,
        is_addition=m.is_addition,
        applies_to=AppliesTo(m.applies_to),
        origin=LedgerOrigin(m.origin),
        split_allocation_id=m.split_allocation_id,
        comment=m.comment,
        driver_name=m.driver_name,
        action=m.action,
        entry_date=m.entry_date,
        created_at=m.created_at,
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_id(self, order_id: int) -> Order | None:
        m = await self._s.get(OrderModel, order_id)
        return _order_to_domain(m) if m else None

    async def get_for_update(self, order_id: int) -> Order | None:
        # Customers are outer-joined; lock only the orders row
        result = await self._s.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .with_for_update(of=OrderModel)
        )
        m = result.unique().scalar_one_or_none()
        return _order_to_domain(m) if m else None

    async def update_projection(
        self, order_id: int, status: OrderStatus, is_transfer_order: bool
    ) -> None:
        await self._s.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(status=status.value, is_transfer_order=is_transfer_order)
        )
        await self._s.flush()


class SqlTruckloadRepository(TruckloadRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_id(self, truckload_id: int) -> Truckload | None:
        m = await self._s.get(TruckloadModel, truckload_id)
        return _truckload_to_domain(m) if m else None

    async def get_for_update(self, truckload_id: int) -> Truckload | None:
        result = await self._s.execute(
            select(TruckloadModel)
            .where(TruckloadModel.id == truckload_id)
            .with_for_update()
        )
        m = result.scalar_one_or_none()
        return _truckload_to_domain(m) if m else None

    async def delete(self, truckload_id: int) -> None:
        await self._s.execute(delete(TruckloadModel).where(TruckloadModel.id == truckload_id))
        await self._s.flush()


class SqlAssignmentRepository(AssignmentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def add(self, assignment: Assignment) -> Assignment:
        m = AssignmentModel(
            order_id=assignment.order_id,
            truckload_id=assignment.truckload_id,
            assignment_type=assignment.assignment_type.value,
            sequence_number=assignment.sequence_number,
            assignment_quote=assignment.assignment_quote,
            is_completed=assignment.is_completed,
            exclude_from_load_value=assignment.exclude_from_load_value,
        )
        self._s.add(m)
        try:
            await self._s.flush()
        except IntegrityError as e:
            if UNIQUE_LEG_CONSTRAINT in str(e.orig):
                raise DuplicateLegError(
                    assignment.order_id, assignment.assignment_type.value
                ) from e
            raise
        assignment.id = m.id
        return assignment

    async def get_by_id(self, assignment_id: int) -> Assignment | None:
        m = await self._s.get(AssignmentModel, assignment_id)
        return _assignment_to_domain(m) if m else None

    async def get_by_order(self, order_id: int) -> list[Assignment]:
        result = await self._s.execute(
            select(AssignmentModel)
            .where(AssignmentModel.order_id == order_id)
            .order_by(AssignmentModel.id)
        )
        return [_assignment_to_domain(m) for m in result.scalars()]

    async def get_by_order_and_type(
        self, order_id: int, assignment_type: AssignmentType
    ) -> Assignment | None:
        result = await self._s.execute(
            select(AssignmentModel).where(
                AssignmentModel.order_id == order_id,
                AssignmentModel.assignment_type == assignment_type.value,
            )
        )
        m = result.scalar_one_or_none()
        return _assignment_to_domain(m) if m else None

    async def get_by_truckload(self, truckload_id: int) -> list[Assignment]:
        result = await self._s.execute(
            select(AssignmentModel)
            .where(AssignmentModel.truckload_id == truckload_id)
            .order_by(AssignmentModel.sequence_number, AssignmentModel.id)
        )
        return [_assignment_to_domain(m) for m in result.scalars()]

    async def next_sequence_number(self, truckload_id: int) -> int:
        result = await self._s.execute(
            select(func.coalesce(func.max(AssignmentModel.sequence_number), 0) + 1).where(
                AssignmentModel.truckload_id == truckload_id
            )
        )
        return int(result.scalar_one())

    async def delete(self, assignment_id: int) -> None:
        await self._s.execute(delete(AssignmentModel).where(AssignmentModel.id == assignment_id))
        await self._s.flush()

    async def set_quote(self, assignment_id: int, quote: Decimal | None) -> None:
        await self._s.execute(
            update(AssignmentModel)
            .where(AssignmentModel.id == assignment_id)
            .values(assignment_quote=quote)
        )
        await self._s.flush()

    async def clear_quotes_for_order(self, order_id: int) -> None:
        await self._s.execute(
            update(AssignmentModel)
            .where(
                AssignmentModel.order_id == order_id,
                AssignmentModel.assignment_quote.is_not(None),
            )
            .values(assignment_quote=None)
        )
        await self._s.flush()

    async def set_completed(self, assignment_id: int, completed: bool) -> None:
        await self._s.execute(
            update(AssignmentModel)
            .where(AssignmentModel.id == assignment_id)
            .values(is_completed=completed)
        )
        await self._s.flush()

    async def set_exclude_from_load_value(self, assignment_id: int, exclude: bool) -> None:
        await self._s.execute(
            update(AssignmentModel)
            .where(AssignmentModel.id == assignment_id)
            .values(exclude_from_load_value=exclude)
        )
        await self._s.flush()


class SqlSplitAllocationRepository(SplitAllocationRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_by_order(self, order_id: int) -> SplitAllocation | None:
        result = await self._s.execute(
            select(SplitAllocationModel).where(SplitAllocationModel.order_id == order_id)
        )
        m = result.scalar_one_or_none()
        return _split_to_domain(m) if m else None

    async def get_by_order_for_update(self, order_id: int) -> SplitAllocation | None:
        result = await self._s.execute(
            select(SplitAllocationModel)
            .where(SplitAllocationModel.order_id == order_id)
            .with_for_update()
        )
        m = result.scalar_one_or_none()
        return _split_to_domain(m) if m else None

    async def save(self, allocation: SplitAllocation) -> SplitAllocation:
        result = await self._s.execute(
            select(SplitAllocationModel).where(
                SplitAllocationModel.order_id == allocation.order_id
            )
        )
        m = result.scalar_one_or_none()
        if m is None:
            m = SplitAllocationModel(order_id=allocation.order_id)
            self._s.add(m)
        m.misc_amount = allocation.misc_amount
        m.full_quote_leg = allocation.full_quote_leg.value
        m.full_quote_applies_to = allocation.full_quote_applies_to.value
        m.misc_applies_to = allocation.misc_applies_to.value
        m.state = allocation.state.value
        await self._s.flush()
        allocation.id = m.id
        return allocation

    async def set_state(self, allocation_id: int, state: SplitState) -> None:
        await self._s.execute(
            update(SplitAllocationModel)
            .where(SplitAllocationModel.id == allocation_id)
            .values(state=state.value)
        )
        await self._s.flush()

    async def delete(self, allocation_id: int) -> None:
        await self._s.execute(
            delete(SplitAllocationModel).where(SplitAllocationModel.id == allocation_id)
        )
        await self._s.flush()


class SqlLedgerRepository(LedgerRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def add(self, entry: LedgerEntry) -> LedgerEntry:
        m = LedgerEntryModel(
            truckload_id=entry.truckload_id,
            order_id=entry.order_id,
            split_allocation_id=entry.split_allocation_id,
            amount=entry.amount,
            is_addition=entry.is_addition,
            applies_to=entry.applies_to.value,
            origin=entry.origin.value,
            comment=entry.comment,
            driver_name=entry.driver_name,
            action=entry.action,
            entry_date=entry.entry_date,
        )
        self._s.add(m)
        await self._s.flush()
        entry.id = m.id
        entry.created_at = m.created_at
        return entry

    async def get_by_id(self, entry_id: int) -> LedgerEntry | None:
        m = await self._s.get(LedgerEntryModel, entry_id)
        return _ledger_to_domain(m) if m else None

    async def get_by_truckload(
        self, truckload_id: int, origin: LedgerOrigin | None = None
    ) -> list[LedgerEntry]:
        stmt = select(LedgerEntryModel).where(LedgerEntryModel.truckload_id == truckload_id)
        if origin is not None:
            stmt = stmt.where(LedgerEntryModel.origin == origin.value)
        result = await self._s.execute(
            stmt.order_by(LedgerEntryModel.created_at, LedgerEntryModel.id)
        )
        return [_ledger_to_domain(m) for m in result.scalars()]

    async def get_by_split_allocation(self, allocation_id: int) -> list[LedgerEntry]:
        result = await self._s.execute(
            select(LedgerEntryModel)
            .where(LedgerEntryModel.split_allocation_id == allocation_id)
            .order_by(LedgerEntryModel.id)
        )
        return [_ledger_to_domain(m) for m in result.scalars()]

    async def delete(self, entry_id: int) -> None:
        await self._s.execute(delete(LedgerEntryModel).where(LedgerEntryModel.id == entry_id))
        await self._s.flush()

    async def delete_by_split_allocation(self, allocation_id: int) -> int:
        result = await self._s.execute(
            delete(LedgerEntryModel).where(LedgerEntryModel.split_allocation_id == allocation_id)
        )
        await self._s.flush()
        return result.rowcount or 0

    async def delete_by_truckload(self, truckload_id: int) -> int:
        result = await self._s.execute(
            delete(LedgerEntryModel).where(LedgerEntryModel.truckload_id == truckload_id)
        )
        await self._s.flush()
        return result.rowcount or 0
