"""Port interface for split allocation persistence."""

from abc import ABC, abstractmethod

from app.domain.entities.split_allocation import SplitAllocation
from app.domain.value_objects.enums import SplitState


class SplitAllocationRepository(ABC):
    @abstractmethod
    async def get_by_order(self, order_id: int) -> SplitAllocation | None:
        ...

    @abstractmethod
    async def get_by_order_for_update(self, order_id: int) -> SplitAllocation | None:
        """Load the allocation with a row lock (SELECT ... FOR UPDATE).

        Concurrent apply() calls on the same order serialize on this lock.
        """
        ...

    @abstractmethod
    async def save(self, allocation: SplitAllocation) -> SplitAllocation:
        """Insert or update the order's single allocation (keyed by order_id)."""
        ...

    @abstractmethod
    async def set_state(self, allocation_id: int, state: SplitState) -> None:
        ...

    @abstractmethod
    async def delete(self, allocation_id: int) -> None:
        ...
