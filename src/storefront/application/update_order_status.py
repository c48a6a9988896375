"""Application service: Update Order Status use case (admin).

Drives the order state machine and its side effects:

- ``Shipped``: every line item's product stock is decremented (and its
  sales counter incremented), all or nothing.
- ``Delivered``: the delivered timestamp is stamped.
- ``Cancelled``: status only; stock that already left with a shipment
  is not put back.

The transition is a check-and-set on the order's current status. The
handler claims the order at the status it just read, applies side
effects, and only then commits the new status. A duplicated or racing
request cannot claim the same order, so stock is decremented exactly
once per shipment. Any failure releases the claim and undoes applied
stock changes, leaving the order exactly as it was.
"""

from __future__ import annotations

import structlog

from storefront.application.auth_gate import ADMIN_ONLY, AuthGate
from storefront.domain.exceptions import EntityNotFoundError, InvalidTransitionError
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        auth: AuthGate,
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._auth = auth

    async def handle(self, token: str | None, order_id: int, status: str) -> Order:
        admin = await self._auth.require(token, ADMIN_ONLY)
        target = OrderStatus.parse(status)

        order = await self._load(order_id)
        order.ensure_can_transition(target)
        previous = order.status

        if not await self._order_repo.try_claim(order_id, previous):
            # Lost the race: report against whatever state the winner left.
            current = await self._load(order_id)
            current.ensure_can_transition(target)
            raise InvalidTransitionError(
                f"Order #{order_id} is already being moved out of {previous.value}"
            )

        try:
            await self._apply(order, target)
        except BaseException:
            await self._order_repo.release(order_id)
            raise

        logger.info(
            "Order status changed",
            order_id=order_id,
            previous=previous.value,
            status=target.value,
            by=admin.id,
        )
        return order

    async def _apply(self, order: Order, target: OrderStatus) -> None:
        ships = target is OrderStatus.SHIPPED
        if ships:
            await self._ledger.decrement_for_order(order)

        try:
            order.transition_to(target)
            await self._order_repo.commit(order)
        except BaseException:
            if ships:
                await self._ledger.restock_for_order(order)
            raise

    async def _load(self, order_id: int) -> Order:
        order = await self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order
