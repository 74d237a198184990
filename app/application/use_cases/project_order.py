"""OrderProjector — recompute an order's status and transfer flag."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.order_repo import OrderRepository
from app.domain.entities.assignment import Assignment
from app.domain.policies.order_status import OrderProjection, project_status
from app.domain.policies.transfer_detection import classify_legs
from app.domain.value_objects.enums import LegClassification

logger = logging.getLogger(__name__)


@dataclass
class ProjectionResult:
    order_id: int
    classification: LegClassification
    projection: OrderProjection
    assignments: list[Assignment]


class OrderProjector:
    """Last step of every assignment mutation.

    Reads the order's assignment set and writes status + is_transfer_order.
    Never creates or deletes assignments or ledger entries.
    """

    def __init__(self, order_repo: OrderRepository, assignment_repo: AssignmentRepository):
        self._orders = order_repo
        self._assignments = assignment_repo

    async def project(self, order_id: int) -> ProjectionResult:
        assignments = await self._assignments.get_by_order(order_id)
        classification = classify_legs(assignments)
        projection = project_status(classification)
        await self._orders.update_projection(
            order_id, projection.status, projection.is_transfer_order
        )
        logger.debug(
            "Order %s: classification=%s, status=%s, transfer=%s",
            order_id, classification.value, projection.status.value,
            projection.is_transfer_order,
        )
        return ProjectionResult(
            order_id=order_id,
            classification=classification,
            projection=projection,
            assignments=assignments,
        )
