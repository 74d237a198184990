"""Tests for OrderProjector."""

from __future__ import annotations

import pytest

from app.domain.entities.assignment import Assignment
from app.domain.value_objects.enums import AssignmentType, LegClassification, OrderStatus


@pytest.mark.asyncio
async def test_projects_unassigned_order(projector, repos):
    result = await projector.project(2)

    assert result.classification == LegClassification.UNASSIGNED
    assert result.assignments == []
    assert repos.orders.orders[2].status == OrderStatus.UNASSIGNED


@pytest.mark.asyncio
async def test_projection_reads_stored_legs(projector, repos):
    await repos.assignments.add(Assignment(
        id=None, order_id=2, truckload_id=1,
        assignment_type=AssignmentType.PICKUP, sequence_number=1,
    ))
    await repos.assignments.add(Assignment(
        id=None, order_id=2, truckload_id=1,
        assignment_type=AssignmentType.DELIVERY, sequence_number=2,
    ))

    result = await projector.project(2)

    assert result.classification == LegClassification.TRANSFER
    assert result.projection.is_transfer_order is True
    assert repos.orders.orders[2].is_transfer_order is True
    assert repos.orders.orders[2].status == OrderStatus.BOTH_ASSIGNED
