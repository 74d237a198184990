"""Port interface for order persistence."""

from abc import ABC, abstractmethod

from app.domain.entities.order import Order
from app.domain.value_objects.enums import OrderStatus


class OrderRepository(ABC):
    @abstractmethod
    async def get_by_id(self, order_id: int) -> Order | None:
        ...

    @abstractmethod
    async def get_for_update(self, order_id: int) -> Order | None:
        """Load the order and hold a row lock on it until the transaction ends."""
        ...

    @abstractmethod
    async def update_projection(
        self, order_id: int, status: OrderStatus, is_transfer_order: bool
    ) -> None:
        ...
