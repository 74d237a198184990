"""Truckload endpoints — stop lists, split loads and deletion."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session, transaction
from app.application.use_cases.manage_assignments import AssignmentStore
from app.application.use_cases.split_allocation import SplitAllocationManager
from app.infrastructure.api.dependencies import get_assignment_store, get_split_manager
from app.infrastructure.api.serializers import (
    serialize_assignment,
    serialize_order,
    serialize_split,
)

router = APIRouter(prefix="/truckloads", tags=["truckloads"])


class ExcludeFromLoadValueRequest(BaseModel):
    exclude_from_load_value: bool


@router.get("/{truckload_id}/stops")
async def list_stops(
    truckload_id: int,
    store: AssignmentStore = Depends(get_assignment_store),
):
    stops = await store.list_truckload_stops(truckload_id)
    return {
        "truckload_id": truckload_id,
        "total": len(stops),
        "stops": [serialize_assignment(s) for s in stops],
    }


@router.patch("/{truckload_id}/assignments/{assignment_id}")
async def update_stop(
    truckload_id: int,
    assignment_id: int,
    body: ExcludeFromLoadValueRequest,
    store: AssignmentStore = Depends(get_assignment_store),
    session: AsyncSession = Depends(get_session),
):
    async with transaction(session):
        assignment = await store.set_exclude_from_load_value(
            truckload_id, assignment_id, body.exclude_from_load_value
        )
    return {"success": True, "assignment": serialize_assignment(assignment)}


@router.get("/{truckload_id}/split-loads")
async def list_split_loads(
    truckload_id: int,
    manager: SplitAllocationManager = Depends(get_split_manager),
):
    """Stops on this truckload whose order pays out across two drivers."""
    rows = await manager.list_truckload_split_orders(truckload_id)
    return {
        "truckload_id": truckload_id,
        "split_loads": [
            {
                "assignment": serialize_assignment(r.assignment),
                "order": serialize_order(r.order),
                "split_load": serialize_split(r.allocation),
                "other_truckload_id": r.other_truckload_id,
            }
            for r in rows
        ],
    }


@router.delete("/{truckload_id}")
async def delete_truckload(
    truckload_id: int,
    store: AssignmentStore = Depends(get_assignment_store),
    session: AsyncSession = Depends(get_session),
):
    async with transaction(session):
        result = await store.delete_truckload(truckload_id)
    return {
        "success": True,
        "deleted": result.deleted,
        "truckload_id": result.truckload_id,
        "affected_order_ids": result.affected_order_ids,
        "removed_assignments": result.removed_assignments,
        "removed_ledger_entries": result.removed_ledger_entries,
    }
