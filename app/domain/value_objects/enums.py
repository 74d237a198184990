"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class AssignmentType(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"

    @property
    def other(self) -> "AssignmentType":
        return AssignmentType.DELIVERY if self is AssignmentType.PICKUP else AssignmentType.PICKUP


class AppliesTo(str, Enum):
    LOAD_VALUE = "load_value"
    DRIVER_PAY = "driver_pay"


class LedgerOrigin(str, Enum):
    SPLIT_ALLOCATION = "split_allocation"
    MANUAL = "manual"


class SplitState(str, Enum):
    PENDING = "pending"
    APPLIED = "applied"


class LegClassification(str, Enum):
    UNASSIGNED = "unassigned"
    PICKUP_ONLY = "pickup_only"
    DELIVERY_ONLY = "delivery_only"
    TRANSFER = "transfer"
    SPLIT_ACROSS_LOADS = "split_across_loads"


class OrderStatus(str, Enum):
    UNASSIGNED = "unassigned"
    PICKUP_ASSIGNED = "pickup_assigned"
    DELIVERY_ASSIGNED = "delivery_assigned"
    BOTH_ASSIGNED = "both_assigned"
    COMPLETED = "completed"
