"""LedgerEntry entity — a pay adjustment attributed to a truckload."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from app.domain.value_objects.enums import AppliesTo, LedgerOrigin


@dataclass
class LedgerEntry:
    id: int | None
    truckload_id: int
    amount: Decimal  # always positive; direction is carried by is_addition
    is_addition: bool
    applies_to: AppliesTo
    origin: LedgerOrigin
    comment: str
    order_id: int | None = None
    split_allocation_id: int | None = None
    driver_name: str | None = None
    action: str | None = None
    entry_date: date | None = None
    created_at: datetime | None = None

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.is_addition else -self.amount

    def is_managed(self) -> bool:
        """True when the entry is owned by a split allocation lifecycle."""
        return self.origin == LedgerOrigin.SPLIT_ALLOCATION
