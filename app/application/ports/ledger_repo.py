"""Port interface for the pay adjustment ledger."""

from abc import ABC, abstractmethod

from app.domain.entities.ledger_entry import LedgerEntry
from app.domain.value_objects.enums import LedgerOrigin


class LedgerRepository(ABC):
    @abstractmethod
    async def add(self, entry: LedgerEntry) -> LedgerEntry:
        ...

    @abstractmethod
    async def get_by_id(self, entry_id: int) -> LedgerEntry | None:
        ...

    @abstractmethod
    async def get_by_truckload(
        self, truckload_id: int, origin: LedgerOrigin | None = None
    ) -> list[LedgerEntry]:
        """Return entries ordered by creation time, then id."""
        ...

    @abstractmethod
    async def get_by_split_allocation(self, allocation_id: int) -> list[LedgerEntry]:
        ...

    @abstractmethod
    async def delete(self, entry_id: int) -> None:
        ...

    @abstractmethod
    async def delete_by_split_allocation(self, allocation_id: int) -> int:
        """Delete every entry owned by the allocation; return how many were removed."""
        ...

    @abstractmethod
    async def delete_by_truckload(self, truckload_id: int) -> int:
        ...
