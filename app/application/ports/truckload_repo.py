"""Port interface for truckload persistence."""

from abc import ABC, abstractmethod

from app.domain.entities.truckload import Truckload


class TruckloadRepository(ABC):
    @abstractmethod
    async def get_by_id(self, truckload_id: int) -> Truckload | None:
        ...

    @abstractmethod
    async def get_for_update(self, truckload_id: int) -> Truckload | None:
        """Load the truckload and lock it; serializes stop numbering."""
        ...

    @abstractmethod
    async def delete(self, truckload_id: int) -> None:
        ...
