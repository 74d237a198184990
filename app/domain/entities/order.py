"""Order entity — a shipment request created by order intake."""

from dataclasses import dataclass
from decimal import Decimal

from app.domain.value_objects.enums import AssignmentType, OrderStatus


@dataclass
class Order:
    id: int | None
    freight_quote: Decimal
    pickup_customer_id: int | None
    delivery_customer_id: int | None
    status: OrderStatus = OrderStatus.UNASSIGNED
    is_transfer_order: bool = False
    pickup_customer_name: str | None = None
    delivery_customer_name: str | None = None

    def customer_name_for(self, leg: AssignmentType) -> str:
        """Display name of the customer served by *leg*, falling back to the order id."""
        name = (
            self.pickup_customer_name
            if leg is AssignmentType.PICKUP
            else self.delivery_customer_name
        )
        if name and name.strip():
            return name.strip()
        return f"Order #{self.id}"
