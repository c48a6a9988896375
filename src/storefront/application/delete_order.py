"""Application service: Delete Order use case (admin, hard delete)."""

from __future__ import annotations

import structlog

from storefront.application.auth_gate import ADMIN_ONLY, AuthGate
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class DeleteOrderHandler:

    def __init__(self, order_repo: OrderRepository, auth: AuthGate) -> None:
        self._order_repo = order_repo
        self._auth = auth

    async def handle(self, token: str | None, order_id: int) -> None:
        admin = await self._auth.require(token, ADMIN_ONLY)

        if not await self._order_repo.delete(order_id):
            raise EntityNotFoundError(f"Order #{order_id} not found")
        logger.info("Order deleted", order_id=order_id, by=admin.id)
