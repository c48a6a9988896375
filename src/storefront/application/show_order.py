"""Application services: order queries for customers (queries)."""

from __future__ import annotations

from storefront.application.auth_gate import AuthGate
from storefront.domain.exceptions import EntityNotFoundError, ForbiddenError
from storefront.domain.model.order import Order
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository, auth: AuthGate) -> None:
        self._order_repo = order_repo
        self._auth = auth

    async def handle(self, token: str | None, order_id: int) -> Order:
        """Return one order; only its owner or an admin may read it."""
        user = await self._auth.authenticate(token)

        order = await self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        if not (user.is_admin or order.is_owned_by(user.id)):
            raise ForbiddenError(f"Order #{order_id} does not belong to you")
        return order


class ListMyOrdersHandler:

    def __init__(self, order_repo: OrderRepository, auth: AuthGate) -> None:
        self._order_repo = order_repo
        self._auth = auth

    async def handle(self, token: str | None) -> list[Order]:
        user = await self._auth.authenticate(token)
        return await self._order_repo.list_by_user(user.id)
