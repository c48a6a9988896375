"""Product aggregate.

The storefront sells a single master product today, but nothing here
assumes that: products are keyed by id like any other aggregate. Stock
and the cumulative sales counter live on the product itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - ``price`` is strictly positive
    - ``stock`` is always >= 0
    - ``sales`` only grows through fulfilment (and shrinks only when a
      failed fulfilment is compensated)
    """

    id: str | None
    name: str
    price: Money
    description: str = ""
    category: str = ""
    stock: int = 0
    sales: int = 0
    images: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        if self.stock < 0:
            raise ValidationError("Product stock cannot be negative")

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Product stock cannot be negative")
        self.stock = quantity

    def decrement_stock(self, quantity: int) -> None:
        """Take *quantity* units out of stock and count them as sold.

        Fails rather than clamps: overselling surfaces as an error.
        """
        if quantity <= 0:
            raise ValidationError("Decrement quantity must be positive")
        if quantity > self.stock:
            raise InsufficientStockError(
                f"Insufficient stock for {self.name} "
                f"(need {quantity}, have {self.stock})"
            )
        self.stock -= quantity
        self.sales += quantity

    def restock(self, quantity: int) -> None:
        """Exact inverse of ``decrement_stock``, used for compensation."""
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        if quantity > self.sales:
            raise ValidationError(
                f"Cannot restock {quantity} of {self.name} "
                f"(only {self.sales} recorded as sold)"
            )
        self.stock += quantity
        self.sales -= quantity
