"""Order endpoints — leg listing and split-load configuration."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session, transaction
from app.application.use_cases.manage_assignments import AssignmentStore
from app.application.use_cases.split_allocation import SplitAllocationManager
from app.domain.value_objects.enums import AppliesTo, AssignmentType
from app.infrastructure.api.dependencies import get_assignment_store, get_split_manager
from app.infrastructure.api.serializers import (
    serialize_assignment,
    serialize_order,
    serialize_split,
)

router = APIRouter(prefix="/orders", tags=["orders"])


class SplitLoadRequest(BaseModel):
    misc_amount: Decimal
    full_quote_leg: AssignmentType
    full_quote_applies_to: AppliesTo = AppliesTo.DRIVER_PAY
    misc_applies_to: AppliesTo = AppliesTo.DRIVER_PAY


@router.get("/{order_id}/assignments")
async def list_order_assignments(
    order_id: int,
    store: AssignmentStore = Depends(get_assignment_store),
):
    legs = await store.list_order_assignments(order_id)
    return {"order_id": order_id, "assignments": [serialize_assignment(a) for a in legs]}


@router.get("/{order_id}/split-load")
async def get_split_load(
    order_id: int,
    manager: SplitAllocationManager = Depends(get_split_manager),
):
    """Split configuration plus where each leg currently sits."""
    info = await manager.get_split_info(order_id)
    return {
        "order": serialize_order(info.order),
        "classification": info.classification.value,
        "pickup": serialize_assignment(info.pickup) if info.pickup else None,
        "delivery": serialize_assignment(info.delivery) if info.delivery else None,
        "split_load": serialize_split(info.allocation),
    }


@router.put("/{order_id}/split-load")
async def define_split_load(
    order_id: int,
    body: SplitLoadRequest,
    manager: SplitAllocationManager = Depends(get_split_manager),
    session: AsyncSession = Depends(get_session),
):
    async with transaction(session):
        allocation = await manager.define_split(
            order_id,
            body.misc_amount,
            body.full_quote_leg,
            full_quote_applies_to=body.full_quote_applies_to,
            misc_applies_to=body.misc_applies_to,
        )
    return {"success": True, "split_load": serialize_split(allocation)}


@router.delete("/{order_id}/split-load")
async def clear_split_load(
    order_id: int,
    manager: SplitAllocationManager = Depends(get_split_manager),
    session: AsyncSession = Depends(get_session),
):
    async with transaction(session):
        cleared = await manager.clear_split(order_id)
    return {"success": True, "cleared": cleared}
