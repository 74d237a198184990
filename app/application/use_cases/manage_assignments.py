"""AssignmentStore — bind and unbind order legs to truckloads.

Every mutation runs one fixed pipeline inside the caller's transaction:

  1. write the assignment change
  2. classify legs + project order status (OrderProjector)
  3. split check: apply on creation, tear down on removal

Ledger writes in step 3 never feed back into steps 1–2.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.ledger_repo import LedgerRepository
from app.application.ports.order_repo import OrderRepository
from app.application.ports.truckload_repo import TruckloadRepository
from app.application.use_cases.project_order import OrderProjector
from app.application.use_cases.split_allocation import SplitAllocationManager
from app.domain.entities.assignment import Assignment
from app.domain.errors import (
    AssignmentNotFoundError,
    DuplicateLegError,
    OrderNotFoundError,
    TruckloadNotFoundError,
)
from app.domain.value_objects.enums import AssignmentType

logger = logging.getLogger(__name__)


@dataclass
class TruckloadDeletion:
    """Summary of a bulk truckload teardown."""

    truckload_id: int
    deleted: bool
    affected_order_ids: list[int] = field(default_factory=list)
    removed_assignments: int = 0
    removed_ledger_entries: int = 0


class AssignmentStore:
    def __init__(
        self,
        order_repo: OrderRepository,
        truckload_repo: TruckloadRepository,
        assignment_repo: AssignmentRepository,
        ledger_repo: LedgerRepository,
        projector: OrderProjector,
        split_manager: SplitAllocationManager,
    ):
        self._orders = order_repo
        self._truckloads = truckload_repo
        self._assignments = assignment_repo
        self._ledger = ledger_repo
        self._projector = projector
        self._splits = split_manager

    async def create_assignment(
        self,
        order_id: int,
        truckload_id: int,
        assignment_type: AssignmentType,
    ) -> Assignment:
        """Bind one leg of an order to the end of a truckload's stop list.

        Raises:
            OrderNotFoundError, TruckloadNotFoundError, DuplicateLegError
        """
        order = await self._orders.get_for_update(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        truckload = await self._truckloads.get_for_update(truckload_id)
        if truckload is None:
            raise TruckloadNotFoundError(truckload_id)

        # Fast path; the unique constraint in add() still guards the race
        existing = await self._assignments.get_by_order_and_type(order_id, assignment_type)
        if existing is not None:
            raise DuplicateLegError(order_id, assignment_type.value)

        sequence_number = await self._assignments.next_sequence_number(truckload_id)
        assignment = await self._assignments.add(
            Assignment(
                id=None,
                order_id=order_id,
                truckload_id=truckload_id,
                assignment_type=assignment_type,
                sequence_number=sequence_number,
            )
        )
        logger.info(
            "Order %s: %s assigned to truckload %s as stop #%d",
            order_id, assignment_type.value, truckload_id, sequence_number,
        )

        result = await self._projector.project(order_id)
        await self._splits.on_assignment_created(
            order, result.assignments, result.classification
        )
        return assignment

    async def raise_if_leg_taken(self, order_id: int, assignment_type: AssignmentType) -> None:
        """Read-only check used after a failed create: has another caller bound this leg?

        Raises:
            DuplicateLegError
        """
        existing = await self._assignments.get_by_order_and_type(order_id, assignment_type)
        if existing is not None:
            raise DuplicateLegError(order_id, assignment_type.value)

    async def remove_assignment(
        self, order_id: int, assignment_type: AssignmentType
    ) -> Assignment:
        """Unbind one leg; unwinds any split the leg took part in.

        Raises:
            NotFoundError (order or assignment)
        """
        order = await self._orders.get_for_update(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        assignment = await self._assignments.get_by_order_and_type(order_id, assignment_type)
        if assignment is None:
            raise AssignmentNotFoundError(
                f"{order_id}/{assignment_type.value}",
                f"Order {order_id} has no {assignment_type.value} assignment",
            )

        await self._assignments.delete(assignment.id)
        logger.info(
            "Order %s: %s unassigned from truckload %s",
            order_id, assignment_type.value, assignment.truckload_id,
        )

        await self._projector.project(order_id)
        await self._splits.teardown(order_id)
        return assignment

    async def delete_truckload(self, truckload_id: int) -> TruckloadDeletion:
        """Remove a truckload with all its stops and ledger entries.

        Splits of affected orders are torn down (their entries on the other
        truckload go too) and every affected order is re-projected on its own.
        Deleting a missing truckload is a no-op.
        """
        if await self._truckloads.get_by_id(truckload_id) is None:
            logger.info("Truckload %s not found, nothing to delete", truckload_id)
            return TruckloadDeletion(truckload_id=truckload_id, deleted=False)

        stops = await self._assignments.get_by_truckload(truckload_id)
        order_ids = sorted({stop.order_id for stop in stops})

        # Same lock order as create_assignment: orders first, then the truckload
        for order_id in order_ids:
            await self._orders.get_for_update(order_id)
        await self._truckloads.get_for_update(truckload_id)

        for order_id in order_ids:
            await self._splits.teardown(order_id)

        for stop in stops:
            await self._assignments.delete(stop.id)

        removed_entries = await self._ledger.delete_by_truckload(truckload_id)
        await self._truckloads.delete(truckload_id)

        for order_id in order_ids:
            await self._projector.project(order_id)

        logger.info(
            "Truckload %s deleted: %d stops, %d ledger entries, %d orders re-projected",
            truckload_id, len(stops), removed_entries, len(order_ids),
        )
        return TruckloadDeletion(
            truckload_id=truckload_id,
            deleted=True,
            affected_order_ids=order_ids,
            removed_assignments=len(stops),
            removed_ledger_entries=removed_entries,
        )

    async def set_stop_completed(
        self, order_id: int, assignment_type: AssignmentType, completed: bool
    ) -> Assignment:
        assignment = await self._assignments.get_by_order_and_type(order_id, assignment_type)
        if assignment is None:
            raise AssignmentNotFoundError(
                f"{order_id}/{assignment_type.value}",
                f"Order {order_id} has no {assignment_type.value} assignment",
            )
        await self._assignments.set_completed(assignment.id, completed)
        assignment.is_completed = completed
        return assignment

    async def set_exclude_from_load_value(
        self, truckload_id: int, assignment_id: int, exclude: bool
    ) -> Assignment:
        assignment = await self._assignments.get_by_id(assignment_id)
        if assignment is None or assignment.truckload_id != truckload_id:
            raise AssignmentNotFoundError(
                assignment_id,
                f"Assignment {assignment_id} not found on truckload {truckload_id}",
            )
        await self._assignments.set_exclude_from_load_value(assignment_id, exclude)
        assignment.exclude_from_load_value = exclude
        return assignment

    async def list_truckload_stops(self, truckload_id: int) -> list[Assignment]:
        if await self._truckloads.get_by_id(truckload_id) is None:
            raise TruckloadNotFoundError(truckload_id)
        return await self._assignments.get_by_truckload(truckload_id)

    async def list_order_assignments(self, order_id: int) -> list[Assignment]:
        if await self._orders.get_by_id(order_id) is None:
            raise OrderNotFoundError(order_id)
        legs = await self._assignments.get_by_order(order_id)
        # pickup first
        return sorted(legs, key=lambda a: a.assignment_type != AssignmentType.PICKUP)
