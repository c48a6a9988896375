"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items and the
status state machine:

    Pending ──> Shipped ──> Delivered
       │           │
       └───────────┴──────> Cancelled

Delivered and Cancelled are terminal. Side effects of a transition
(stock decrements) are coordinated by the application layer; the
aggregate only decides whether a transition is legal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import (
    AlreadyTerminalError,
    InvalidTransitionError,
    ValidationError,
)
from storefront.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @staticmethod
    def parse(raw: str) -> OrderStatus:
        try:
            return OrderStatus(raw)
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(f"Unknown order status '{raw}' (expected one of: {allowed})")

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class ShippingInfo:
    address: str
    city: str
    state: str
    country: str
    pin_code: str
    phone_no: str

    def __post_init__(self) -> None:
        for name in ("address", "city", "state", "country", "pin_code", "phone_no"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"Shipping {name} is required")


@dataclass(frozen=True)
class PaymentInfo:
    """Confirmation handed over by the (already completed) payment step."""

    id: str
    status: str


@dataclass(frozen=True)
class OrderLineItem:
    """Captures the price snapshot of a product at order-creation time."""

    product_id: str
    name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    image: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    user_id: str
    items: list[OrderLineItem]
    shipping_info: ShippingInfo
    payment_info: PaymentInfo
    items_price: Money
    tax_price: Money
    shipping_price: Money
    total_price: Money
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    paid_at: datetime | None = None
    delivered_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        items: list[OrderLineItem],
        shipping_info: ShippingInfo,
        payment_info: PaymentInfo,
        items_price: Money,
        tax_price: Money,
        shipping_price: Money,
        total_price: Money,
    ) -> Order:
        """Create a new order, enforcing all invariants.

        The caller computes the prices; they are captured verbatim but
        must add up. ``items_price`` has to equal the sum of the line
        totals and ``total_price`` the sum of items, tax and shipping.
        """
        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        line_sum = Money.zero(items_price.currency)
        for item in items:
            line_sum = line_sum + item.line_total
        if line_sum != items_price:
            raise ValidationError(
                f"Items price {items_price} does not match line items total {line_sum}"
            )

        expected_total = items_price + tax_price + shipping_price
        if expected_total != total_price:
            raise ValidationError(
                f"Total price {total_price} does not match items + tax + shipping "
                f"({expected_total})"
            )

        now = datetime.now(timezone.utc)
        return Order(
            id=None,
            user_id=user_id,
            items=list(items),
            shipping_info=shipping_info,
            payment_info=payment_info,
            items_price=items_price,
            tax_price=tax_price,
            shipping_price=shipping_price,
            total_price=total_price,
            status=OrderStatus.PENDING,
            created_at=now,
            paid_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def ensure_can_transition(self, target: OrderStatus) -> None:
        """Raise unless ``target`` is a legal next status.

        Delivered orders get the dedicated AlreadyTerminalError; every
        other illegal edge (including same-status requests and anything
        out of Cancelled) is an InvalidTransitionError.
        """
        if self.status is OrderStatus.DELIVERED:
            raise AlreadyTerminalError(f"Order #{self.id} has already been delivered")
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"Cannot move order #{self.id} from {self.status.value} "
                f"to {target.value}"
            )

    def transition_to(self, target: OrderStatus) -> None:
        self.ensure_can_transition(target)
        self.status = target
        if target is OrderStatus.DELIVERED:
            self.delivered_at = datetime.now(timezone.utc)

    # --- Queries --------------------------------------------------------------

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id

    def quantities_by_product(self) -> dict[str, int]:
        """Total quantity per product; repeated lines are merged."""
        result: dict[str, int] = {}
        for item in self.items:
            result[item.product_id] = result.get(item.product_id, 0) + item.quantity.value
        return result
