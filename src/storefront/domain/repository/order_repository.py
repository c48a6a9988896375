"""Abstract repository for the Order aggregate.

Besides plain reads and writes, the repository owns the check-and-set
guard used by status transitions:

    try_claim(id, expected)  ->  side effects  ->  commit(order)
                                      └── on failure ──> release(id)

Only one caller can hold the claim on an order, and only while the
stored status still equals ``expected``. Stored status changes only in
``commit``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    async def add(self, order: Order) -> Order:
        """Persist a new order and assign its ID."""

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    async def list_by_user(self, user_id: str) -> list[Order]:
        """Return every order placed by *user_id*."""

    @abstractmethod
    async def list_all(self) -> list[Order]:
        """Return every order."""

    @abstractmethod
    async def delete(self, order_id: int) -> bool:
        """Hard-delete an order. Returns False if it did not exist."""

    @abstractmethod
    async def try_claim(self, order_id: int, expected_status: OrderStatus) -> bool:
        """Claim an order for a transition out of *expected_status*.

        Returns False if the order is missing, its stored status differs
        from *expected_status*, or another transition holds the claim.
        """

    @abstractmethod
    async def commit(self, order: Order) -> None:
        """Persist a claimed order's new state and drop the claim.

        Raises EntityNotFoundError if the order was deleted while claimed;
        the claim is dropped either way.
        """

    @abstractmethod
    async def release(self, order_id: int) -> None:
        """Drop a claim without changing the stored order."""
