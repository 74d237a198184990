"""SplitAllocation entity — how an order's quote is divided between its two legs."""

from dataclasses import dataclass
from decimal import Decimal

from app.domain.value_objects.enums import AppliesTo, AssignmentType, SplitState


@dataclass
class SplitAllocation:
    id: int | None
    order_id: int
    misc_amount: Decimal
    full_quote_leg: AssignmentType
    full_quote_applies_to: AppliesTo = AppliesTo.DRIVER_PAY
    misc_applies_to: AppliesTo = AppliesTo.DRIVER_PAY
    state: SplitState = SplitState.PENDING

    @property
    def misc_leg(self) -> AssignmentType:
        return self.full_quote_leg.other

    def is_applied(self) -> bool:
        return self.state == SplitState.APPLIED
