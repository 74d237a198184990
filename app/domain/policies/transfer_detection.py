"""TransferDetectionPolicy — classify an order by where its legs are bound."""

from __future__ import annotations

from collections.abc import Iterable

from app.domain.entities.assignment import Assignment
from app.domain.value_objects.enums import AssignmentType, LegClassification


def classify_legs(assignments: Iterable[Assignment]) -> LegClassification:
    """Pure function: an order's current assignment set → classification.

    Rules:
      0 assignments                         →  unassigned
      1 assignment                          →  pickup_only / delivery_only
      2 assignments on the same truckload   →  transfer
      2 assignments on different truckloads →  split_across_loads

    Raises:
        ValueError: if the set violates the one-pickup/one-delivery invariant.
    """
    legs = list(assignments)
    if len(legs) > 2:
        raise ValueError(f"An order has at most two legs, got {len(legs)}")
    if len({a.assignment_type for a in legs}) != len(legs):
        raise ValueError("An order cannot have two assignments of the same type")

    if not legs:
        return LegClassification.UNASSIGNED

    if len(legs) == 1:
        if legs[0].assignment_type == AssignmentType.PICKUP:
            return LegClassification.PICKUP_ONLY
        return LegClassification.DELIVERY_ONLY

    first, second = legs
    if first.truckload_id == second.truckload_id:
        return LegClassification.TRANSFER
    return LegClassification.SPLIT_ACROSS_LOADS


def legs_by_type(assignments: Iterable[Assignment]) -> dict[AssignmentType, Assignment]:
    """Index an order's assignments by leg."""
    return {a.assignment_type: a for a in assignments}
