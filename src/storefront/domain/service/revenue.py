"""Domain service: revenue aggregation.

Revenue is never stored. It is derived from the order list on every
request, so cancelling an order is reflected immediately.
"""

from __future__ import annotations

from collections.abc import Iterable

from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import Money


def total_revenue(orders: Iterable[Order], currency: str = "INR") -> Money:
    """Sum of ``total_price`` over every order that is not cancelled."""
    result = Money.zero(currency)
    for order in orders:
        if order.status is not OrderStatus.CANCELLED:
            result = result + order.total_price
    return result
