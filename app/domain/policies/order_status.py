"""OrderStatusPolicy — derive the externally visible order status."""

from dataclasses import dataclass

from app.domain.value_objects.enums import LegClassification, OrderStatus

_STATUS_BY_CLASSIFICATION: dict[LegClassification, OrderStatus] = {
    LegClassification.UNASSIGNED: OrderStatus.UNASSIGNED,
    LegClassification.PICKUP_ONLY: OrderStatus.PICKUP_ASSIGNED,
    LegClassification.DELIVERY_ONLY: OrderStatus.DELIVERY_ASSIGNED,
    LegClassification.TRANSFER: OrderStatus.BOTH_ASSIGNED,
    LegClassification.SPLIT_ACROSS_LOADS: OrderStatus.BOTH_ASSIGNED,
}


@dataclass(frozen=True)
class OrderProjection:
    status: OrderStatus
    is_transfer_order: bool


def project_status(classification: LegClassification) -> OrderProjection:
    return OrderProjection(
        status=_STATUS_BY_CLASSIFICATION[classification],
        is_transfer_order=classification == LegClassification.TRANSFER,
    )
