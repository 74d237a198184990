"""Ledger endpoints — per-truckload pay adjustments."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session, transaction
from app.application.use_cases.ledger import LedgerService
from app.domain.value_objects.enums import AppliesTo, LedgerOrigin
from app.infrastructure.api.dependencies import get_ledger_service
from app.infrastructure.api.serializers import money, serialize_ledger_entry

router = APIRouter(tags=["ledger"])


class ManualAdjustmentRequest(BaseModel):
    amount: Decimal
    is_addition: bool = False
    applies_to: AppliesTo = AppliesTo.DRIVER_PAY
    comment: str = ""
    order_id: int | None = None
    driver_name: str | None = None
    action: str | None = None
    entry_date: date | None = None


@router.get("/truckloads/{truckload_id}/ledger")
async def list_ledger(
    truckload_id: int,
    origin: LedgerOrigin | None = None,
    service: LedgerService = Depends(get_ledger_service),
):
    entries = await service.list_for_truckload(truckload_id, origin)
    return {
        "truckload_id": truckload_id,
        "total": len(entries),
        "net_amount": money(sum((e.signed_amount for e in entries), Decimal("0"))),
        "entries": [serialize_ledger_entry(e) for e in entries],
    }


@router.post("/truckloads/{truckload_id}/ledger", status_code=201)
async def record_adjustment(
    truckload_id: int,
    body: ManualAdjustmentRequest,
    service: LedgerService = Depends(get_ledger_service),
    session: AsyncSession = Depends(get_session),
):
    async with transaction(session):
        entry = await service.record_manual_adjustment(
            truckload_id,
            body.amount,
            body.is_addition,
            body.applies_to,
            body.comment,
            order_id=body.order_id,
            driver_name=body.driver_name,
            action=body.action,
            entry_date=body.entry_date,
        )
    return {"success": True, "entry": serialize_ledger_entry(entry)}


@router.delete("/ledger/{entry_id}")
async def delete_adjustment(
    entry_id: int,
    service: LedgerService = Depends(get_ledger_service),
    session: AsyncSession = Depends(get_session),
):
    """Only manual entries; split entries follow their allocation."""
    async with transaction(session):
        entry = await service.delete_manual_adjustment(entry_id)
    return {"success": True, "deleted": serialize_ledger_entry(entry)}
