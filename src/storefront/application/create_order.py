"""Application service: Create Order use case.

Orchestrates the flow between the auth gate, repositories, the domain
model and the notification bus. The notification goes out only after
the order is safely persisted; if persistence fails nothing is
announced.
"""

from __future__ import annotations

import structlog

from storefront.application.auth_gate import AuthGate
from storefront.application.dto import OrderItemSpec, order_summary
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.notification import NotificationEvent
from storefront.domain.model.order import Order, OrderLineItem, PaymentInfo, ShippingInfo
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.notifications.bus import NotificationBus

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        auth: AuthGate,
        bus: NotificationBus,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._auth = auth
        self._bus = bus

    async def handle(
        self,
        token: str | None,
        items: list[OrderItemSpec],
        shipping_info: ShippingInfo,
        payment_info: PaymentInfo,
        items_price: int,
        tax_price: int,
        shipping_price: int,
        total_price: int,
    ) -> Order:
        """Place an order for the signed-in user.

        Steps:
        1. Authenticate the purchaser.
        2. Resolve each product id (fail if not found).
        3. Build line items with the *submitted* unit prices (snapshot).
        4. Let the Order aggregate validate totals and business rules.
        5. Persist, then notify admin observers.
        """
        user = await self._auth.authenticate(token)

        line_items: list[OrderLineItem] = []
        for line in items:
            product = await self._product_repo.get_by_id(line.product_id)
            if product is None:
                raise EntityNotFoundError(f"Product not found: '{line.product_id}'")

            line_items.append(
                OrderLineItem(
                    product_id=product.id,
                    name=line.name or product.name,
                    quantity=Quantity(line.quantity),
                    unit_price=Money(line.price),  # <-- price snapshot
                    image=line.image or (product.images[0] if product.images else ""),
                )
            )

        order = Order.create(
            user_id=user.id,
            items=line_items,
            shipping_info=shipping_info,
            payment_info=payment_info,
            items_price=Money(items_price),
            tax_price=Money(tax_price),
            shipping_price=Money(shipping_price),
            total_price=Money(total_price),
        )
        order = await self._order_repo.add(order)
        logger.info(
            "Order created",
            order_id=order.id,
            user_id=user.id,
            total_price=order.total_price.amount,
        )

        await self._bus.publish(
            NotificationEvent(
                message=f"New Order placed by {user.name} for {order.total_price}",
                category="order",
                payload=order_summary(order, user),
            )
        )
        return order
