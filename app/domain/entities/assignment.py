"""Assignment entity — binds one leg of an order to a truckload stop."""

from dataclasses import dataclass
from decimal import Decimal

from app.domain.value_objects.enums import AssignmentType


@dataclass
class Assignment:
    id: int | None
    order_id: int
    truckload_id: int
    assignment_type: AssignmentType
    sequence_number: int
    assignment_quote: Decimal | None = None
    is_completed: bool = False
    exclude_from_load_value: bool = False

    @property
    def has_quote_override(self) -> bool:
        return self.assignment_quote is not None
