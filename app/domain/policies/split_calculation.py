"""SplitCalculationPolicy — divide a freight quote between two truckloads.

The leg named by ``full_quote_leg`` keeps ``freight_quote - misc_amount``; the
other leg keeps ``misc_amount``. Pay moves between the two drivers through a
pair of ledger entries of ``misc_amount``:

  * a deduction on the truckload holding the full-quote leg
    (applies to ``full_quote_applies_to``);
  * an addition on the truckload holding the misc leg
    (applies to ``misc_applies_to``).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from app.domain.entities.assignment import Assignment
from app.domain.entities.order import Order
from app.domain.entities.split_allocation import SplitAllocation
from app.domain.errors import InvalidAmountError, SplitNotEligibleError
from app.domain.value_objects.enums import AppliesTo, AssignmentType
from app.domain.value_objects.money import to_money


@dataclass(frozen=True)
class LedgerLine:
    """A ledger entry to be written, before it has an id."""

    truckload_id: int
    amount: Decimal
    is_addition: bool
    applies_to: AppliesTo
    comment: str


@dataclass(frozen=True)
class SplitPlan:
    full_portion: Decimal
    misc_amount: Decimal
    quotes: dict[AssignmentType, Decimal]
    deduction: LedgerLine
    addition: LedgerLine

    @property
    def entries(self) -> tuple[LedgerLine, LedgerLine]:
        return (self.deduction, self.addition)


def validate_misc_amount(freight_quote: Decimal, misc_amount: Decimal) -> Decimal:
    """Return the cent-quantized misc amount, or raise if it is out of range.

    Raises:
        InvalidAmountError: unless ``0 < misc_amount < freight_quote``.
    """
    try:
        misc = to_money(misc_amount)
    except ValueError as e:
        raise InvalidAmountError(str(e)) from e
    quote = to_money(freight_quote)
    if misc <= 0:
        raise InvalidAmountError(f"Misc amount must be greater than 0, got {misc}")
    if misc >= quote:
        raise InvalidAmountError(
            f"Misc amount {misc} must be less than the order's freight quote {quote}"
        )
    return misc


def split_comment(order: Order, leg: AssignmentType) -> str:
    """Ledger comment naming the customer on the *other* side of the split."""
    return f"{order.customer_name_for(leg)} split load (misc portion)"


def plan_split(
    order: Order,
    allocation: SplitAllocation,
    legs: dict[AssignmentType, Assignment],
) -> SplitPlan:
    """Pure function: compute quote overrides and the ledger pair for a split.

    Raises:
        InvalidAmountError: if the misc amount no longer fits the order's quote.
        SplitNotEligibleError: unless both legs exist on different truckloads.
    """
    full_leg = allocation.full_quote_leg
    misc_leg = allocation.misc_leg
    full_assignment = legs.get(full_leg)
    misc_assignment = legs.get(misc_leg)
    if full_assignment is None or misc_assignment is None:
        raise SplitNotEligibleError(
            f"Order {order.id} needs both pickup and delivery assigned to apply a split"
        )
    if full_assignment.truckload_id == misc_assignment.truckload_id:
        raise SplitNotEligibleError(
            f"Order {order.id} has both legs on truckload {full_assignment.truckload_id}"
        )

    misc = validate_misc_amount(order.freight_quote, allocation.misc_amount)
    full_portion = to_money(order.freight_quote) - misc

    deduction = LedgerLine(
        truckload_id=full_assignment.truckload_id,
        amount=misc,
        is_addition=False,
        applies_to=allocation.full_quote_applies_to,
        comment=split_comment(order, misc_leg),
    )
    addition = LedgerLine(
        truckload_id=misc_assignment.truckload_id,
        amount=misc,
        is_addition=True,
        applies_to=allocation.misc_applies_to,
        comment=split_comment(order, full_leg),
    )
    return SplitPlan(
        full_portion=full_portion,
        misc_amount=misc,
        quotes={full_leg: full_portion, misc_leg: misc},
        deduction=deduction,
        addition=addition,
    )
