"""SplitAllocationManager — lifecycle of an order's split-load configuration.

States: pending → applied → (teardown) pending, or deleted by clear_split.

Every apply is delete-then-insert of the allocation's ledger pair, so applying
twice, or retrying after a partial client failure, converges on exactly two
entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.ledger_repo import LedgerRepository
from app.application.ports.order_repo import OrderRepository
from app.application.ports.split_allocation_repo import SplitAllocationRepository
from app.application.ports.truckload_repo import TruckloadRepository
from app.domain.entities.assignment import Assignment
from app.domain.entities.ledger_entry import LedgerEntry
from app.domain.entities.order import Order
from app.domain.entities.split_allocation import SplitAllocation
from app.domain.errors import (
    InvalidAmountError,
    OrderNotFoundError,
    SplitAllocationNotFoundError,
    SplitNotEligibleError,
    TransferOrderCannotSplitError,
    TruckloadNotFoundError,
)
from app.domain.policies.split_calculation import plan_split, validate_misc_amount
from app.domain.policies.transfer_detection import classify_legs, legs_by_type
from app.domain.value_objects.enums import (
    AppliesTo,
    AssignmentType,
    LedgerOrigin,
    LegClassification,
    SplitState,
)

logger = logging.getLogger(__name__)


@dataclass
class SplitInfo:
    """Read model for one order's split configuration."""

    order: Order
    classification: LegClassification
    pickup: Assignment | None
    delivery: Assignment | None
    allocation: SplitAllocation | None


@dataclass
class SplitLoadStop:
    """A stop on a truckload whose order carries a split or a quote override."""

    assignment: Assignment
    order: Order
    allocation: SplitAllocation | None
    other_truckload_id: int | None


class SplitAllocationManager:
    def __init__(
        self,
        order_repo: OrderRepository,
        truckload_repo: TruckloadRepository,
        assignment_repo: AssignmentRepository,
        split_repo: SplitAllocationRepository,
        ledger_repo: LedgerRepository,
    ):
        self._orders = order_repo
        self._truckloads = truckload_repo
        self._assignments = assignment_repo
        self._splits = split_repo
        self._ledger = ledger_repo

    # ─── Commands ────────────────────────────────────────────────────

    async def define_split(
        self,
        order_id: int,
        misc_amount: Decimal,
        full_quote_leg: AssignmentType,
        full_quote_applies_to: AppliesTo = AppliesTo.DRIVER_PAY,
        misc_applies_to: AppliesTo = AppliesTo.DRIVER_PAY,
    ) -> SplitAllocation:
        """Create or replace the order's split, applying it if both legs are placed.

        Raises:
            OrderNotFoundError, InvalidAmountError, TransferOrderCannotSplitError
        """
        order = await self._load_order_for_update(order_id)
        misc = validate_misc_amount(order.freight_quote, misc_amount)

        legs = await self._assignments.get_by_order(order_id)
        classification = classify_legs(legs)
        if classification == LegClassification.TRANSFER:
            raise TransferOrderCannotSplitError(order_id)

        existing = await self._splits.get_by_order_for_update(order_id)
        allocation = await self._splits.save(
            SplitAllocation(
                id=existing.id if existing else None,
                order_id=order_id,
                misc_amount=misc,
                full_quote_leg=full_quote_leg,
                full_quote_applies_to=full_quote_applies_to,
                misc_applies_to=misc_applies_to,
                state=SplitState.PENDING,
            )
        )
        logger.info(
            "Order %s: split defined (misc=%s, full quote leg=%s)",
            order_id, misc, full_quote_leg.value,
        )

        if classification == LegClassification.SPLIT_ACROSS_LOADS:
            allocation = await self._apply(order, allocation, legs)
        return allocation

    async def apply(self, order_id: int) -> SplitAllocation:
        """Apply (or re-apply) the order's split to both truckloads.

        Raises:
            OrderNotFoundError, SplitAllocationNotFoundError,
            SplitNotEligibleError, InvalidAmountError
        """
        order = await self._load_order_for_update(order_id)
        allocation = await self._splits.get_by_order_for_update(order_id)
        if allocation is None:
            raise SplitAllocationNotFoundError(order_id)

        legs = await self._assignments.get_by_order(order_id)
        classification = classify_legs(legs)
        if classification != LegClassification.SPLIT_ACROSS_LOADS:
            raise SplitNotEligibleError(
                f"Order {order_id} is {classification.value}; a split applies only "
                "when pickup and delivery are on different truckloads"
            )
        return await self._apply(order, allocation, legs)

    async def teardown(self, order_id: int) -> SplitAllocation | None:
        """Undo an applied split but keep its configuration for reapplication."""
        allocation = await self._splits.get_by_order_for_update(order_id)
        if allocation is None:
            return None

        await self._assignments.clear_quotes_for_order(order_id)
        removed = await self._ledger.delete_by_split_allocation(allocation.id)
        if allocation.state != SplitState.PENDING:
            await self._splits.set_state(allocation.id, SplitState.PENDING)
            allocation.state = SplitState.PENDING

        logger.info(
            "Order %s: split torn down (%d ledger entries removed), back to pending",
            order_id, removed,
        )
        return allocation

    async def clear_split(self, order_id: int) -> bool:
        """Delete the order's split, its ledger entries and quote overrides.

        Returns False when the order had no split.

        Raises:
            OrderNotFoundError
        """
        await self._load_order_for_update(order_id)
        allocation = await self._splits.get_by_order_for_update(order_id)
        await self._assignments.clear_quotes_for_order(order_id)
        if allocation is None:
            logger.info("Order %s: no split to clear", order_id)
            return False

        removed = await self._ledger.delete_by_split_allocation(allocation.id)
        await self._splits.delete(allocation.id)
        logger.info("Order %s: split cleared (%d ledger entries removed)", order_id, removed)
        return True

    async def on_assignment_created(
        self,
        order: Order,
        legs: list[Assignment],
        classification: LegClassification,
    ) -> SplitAllocation | None:
        """Completion check run after a leg is bound to a truckload."""
        allocation = await self._splits.get_by_order_for_update(order.id)
        if allocation is None:
            return None

        if classification == LegClassification.SPLIT_ACROSS_LOADS:
            # The quote may have changed since the split was defined; never block the leg
            try:
                validate_misc_amount(order.freight_quote, allocation.misc_amount)
            except InvalidAmountError as e:
                logger.warning(
                    "Order %s: split stays %s and will not be applied: %s",
                    order.id, allocation.state.value, e.message,
                )
                return allocation
            return await self._apply(order, allocation, legs)

        if classification == LegClassification.TRANSFER:
            logger.warning(
                "Order %s became a transfer order; split stays %s and will not be applied",
                order.id, allocation.state.value,
            )
        return allocation

    # ─── Queries ─────────────────────────────────────────────────────

    async def get_split_info(self, order_id: int) -> SplitInfo:
        order = await self._orders.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        legs = await self._assignments.get_by_order(order_id)
        by_type = legs_by_type(legs)
        return SplitInfo(
            order=order,
            classification=classify_legs(legs),
            pickup=by_type.get(AssignmentType.PICKUP),
            delivery=by_type.get(AssignmentType.DELIVERY),
            allocation=await self._splits.get_by_order(order_id),
        )

    async def list_truckload_split_orders(self, truckload_id: int) -> list[SplitLoadStop]:
        truckload = await self._truckloads.get_by_id(truckload_id)
        if truckload is None:
            raise TruckloadNotFoundError(truckload_id)

        stops: list[SplitLoadStop] = []
        for assignment in await self._assignments.get_by_truckload(truckload_id):
            allocation = await self._splits.get_by_order(assignment.order_id)
            if allocation is None and not assignment.has_quote_override:
                continue
            order = await self._orders.get_by_id(assignment.order_id)
            other = await self._assignments.get_by_order_and_type(
                assignment.order_id, assignment.assignment_type.other
            )
            stops.append(
                SplitLoadStop(
                    assignment=assignment,
                    order=order,
                    allocation=allocation,
                    other_truckload_id=other.truckload_id if other else None,
                )
            )
        return stops

    # ─── Internals ───────────────────────────────────────────────────

    async def _load_order_for_update(self, order_id: int) -> Order:
        order = await self._orders.get_for_update(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def _apply(
        self,
        order: Order,
        allocation: SplitAllocation,
        legs: list[Assignment],
    ) -> SplitAllocation:
        by_type = legs_by_type(legs)
        plan = plan_split(order, allocation, by_type)

        for leg, quote in plan.quotes.items():
            await self._assignments.set_quote(by_type[leg].id, quote)

        replaced = await self._ledger.delete_by_split_allocation(allocation.id)
        for line in plan.entries:
            await self._ledger.add(
                LedgerEntry(
                    id=None,
                    truckload_id=line.truckload_id,
                    order_id=order.id,
                    amount=line.amount,
                    is_addition=line.is_addition,
                    applies_to=line.applies_to,
                    origin=LedgerOrigin.SPLIT_ALLOCATION,
                    split_allocation_id=allocation.id,
                    comment=line.comment,
                )
            )

        if allocation.state != SplitState.APPLIED:
            await self._splits.set_state(allocation.id, SplitState.APPLIED)
            allocation.state = SplitState.APPLIED

        logger.info(
            "Order %s: split applied (full=%s on truckload %s, misc=%s on truckload %s, "
            "%d prior entries replaced)",
            order.id, plan.full_portion, plan.deduction.truckload_id,
            plan.misc_amount, plan.addition.truckload_id, replaced,
        )
        return allocation
