"""LedgerService — read the pay adjustment ledger and manage manual entries."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from app.application.ports.ledger_repo import LedgerRepository
from app.application.ports.order_repo import OrderRepository
from app.application.ports.truckload_repo import TruckloadRepository
from app.domain.entities.ledger_entry import LedgerEntry
from app.domain.errors import (
    InvalidAmountError,
    LedgerEntryNotFoundError,
    ManagedLedgerEntryError,
    OrderNotFoundError,
    TruckloadNotFoundError,
)
from app.domain.value_objects.enums import AppliesTo, LedgerOrigin
from app.domain.value_objects.money import to_money

logger = logging.getLogger(__name__)


class LedgerService:
    def __init__(
        self,
        ledger_repo: LedgerRepository,
        truckload_repo: TruckloadRepository,
        order_repo: OrderRepository,
    ):
        self._ledger = ledger_repo
        self._truckloads = truckload_repo
        self._orders = order_repo

    async def list_for_truckload(
        self, truckload_id: int, origin: LedgerOrigin | None = None
    ) -> list[LedgerEntry]:
        return await self._ledger.get_by_truckload(truckload_id, origin)

    async def record_manual_adjustment(
        self,
        truckload_id: int,
        amount: Decimal,
        is_addition: bool,
        applies_to: AppliesTo,
        comment: str,
        order_id: int | None = None,
        driver_name: str | None = None,
        action: str | None = None,
        entry_date: date | None = None,
    ) -> LedgerEntry:
        """Record a free-standing deduction or addition on a truckload.

        Raises:
            InvalidAmountError, TruckloadNotFoundError, OrderNotFoundError
        """
        try:
            value = to_money(amount)
        except ValueError as e:
            raise InvalidAmountError(str(e)) from e
        if value <= 0:
            raise InvalidAmountError(f"Adjustment amount must be greater than 0, got {value}")

        if await self._truckloads.get_by_id(truckload_id) is None:
            raise TruckloadNotFoundError(truckload_id)
        if order_id is not None and await self._orders.get_by_id(order_id) is None:
            raise OrderNotFoundError(order_id)

        entry = await self._ledger.add(
            LedgerEntry(
                id=None,
                truckload_id=truckload_id,
                order_id=order_id,
                amount=value,
                is_addition=is_addition,
                applies_to=applies_to,
                origin=LedgerOrigin.MANUAL,
                comment=comment.strip(),
                driver_name=driver_name,
                action=action,
                entry_date=entry_date,
            )
        )
        logger.info(
            "Truckload %s: manual %s of %s (%s) recorded",
            truckload_id, "addition" if is_addition else "deduction",
            value, applies_to.value,
        )
        return entry

    async def delete_manual_adjustment(self, entry_id: int) -> LedgerEntry:
        """Raises: LedgerEntryNotFoundError, ManagedLedgerEntryError"""
        entry = await self._ledger.get_by_id(entry_id)
        if entry is None:
            raise LedgerEntryNotFoundError(entry_id)
        if entry.is_managed():
            raise ManagedLedgerEntryError(entry_id)
        await self._ledger.delete(entry_id)
        logger.info("Truckload %s: manual ledger entry %s deleted", entry.truckload_id, entry_id)
        return entry
