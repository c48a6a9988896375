"""Application service: admin order listing with revenue (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.auth_gate import ADMIN_ONLY, AuthGate
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.revenue import total_revenue


@dataclass(frozen=True)
class OrderListing:
    orders: list[Order]
    total_revenue: Money


class ListAllOrdersHandler:

    def __init__(self, order_repo: OrderRepository, auth: AuthGate) -> None:
        self._order_repo = order_repo
        self._auth = auth

    async def handle(self, token: str | None) -> OrderListing:
        await self._auth.require(token, ADMIN_ONLY)
        orders = await self._order_repo.list_all()
        return OrderListing(orders=orders, total_revenue=total_revenue(orders))
