"""Abstract repository for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live in the
infrastructure layer and in the test fakes.

The two stock mutators are conditional updates: each one loads,
checks and writes a single product as one atomic step with respect to
other callers of the same repository.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from storefront.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    async def add(self, product: Product) -> Product:
        """Persist a new product and assign its ID.

        Raises ValidationError if a product with the same name
        (case-insensitive) exists; the check, the ID assignment and the
        insert are one atomic step.
        """

    @abstractmethod
    async def update(self, product_id: str, change: Callable[[Product], None]) -> Product:
        """Apply *change* to the stored product as one atomic read-modify-write.

        Raises EntityNotFoundError if the product does not exist. If
        *change* raises, nothing is written.
        """

    @abstractmethod
    async def decrement_stock(self, product_id: str, quantity: int) -> Product:
        """Decrement stock and increment sales iff stock >= quantity.

        Raises EntityNotFoundError or InsufficientStockError, leaving the
        product untouched.
        """

    @abstractmethod
    async def restock(self, product_id: str, quantity: int) -> Product:
        """Undo a previous ``decrement_stock`` of the same quantity."""
