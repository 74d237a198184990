"""Port interface for assignment persistence."""

from abc import ABC, abstractmethod
from decimal import Decimal

from app.domain.entities.assignment import Assignment
from app.domain.value_objects.enums import AssignmentType


class AssignmentRepository(ABC):
    @abstractmethod
    async def add(self, assignment: Assignment) -> Assignment:
        """Persist a new assignment.

        Must rely on the (order_id, assignment_type) uniqueness constraint and
        raise ``DuplicateLegError`` when it is violated.
        """
        ...

    @abstractmethod
    async def get_by_id(self, assignment_id: int) -> Assignment | None:
        ...

    @abstractmethod
    async def get_by_order(self, order_id: int) -> list[Assignment]:
        ...

    @abstractmethod
    async def get_by_order_and_type(
        self, order_id: int, assignment_type: AssignmentType
    ) -> Assignment | None:
        ...

    @abstractmethod
    async def get_by_truckload(self, truckload_id: int) -> list[Assignment]:
        """Return the truckload's stops ordered by sequence number."""
        ...

    @abstractmethod
    async def next_sequence_number(self, truckload_id: int) -> int:
        """max(sequence_number) on the truckload + 1, or 1 for an empty truckload."""
        ...

    @abstractmethod
    async def delete(self, assignment_id: int) -> None:
        ...

    @abstractmethod
    async def set_quote(self, assignment_id: int, quote: Decimal | None) -> None:
        ...

    @abstractmethod
    async def clear_quotes_for_order(self, order_id: int) -> None:
        ...

    @abstractmethod
    async def set_completed(self, assignment_id: int, completed: bool) -> None:
        ...

    @abstractmethod
    async def set_exclude_from_load_value(self, assignment_id: int, exclude: bool) -> None:
        ...
