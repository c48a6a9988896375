"""Domain service: Inventory Ledger.

Applies the stock side effects of shipping an order. Each single
decrement is atomic in the product repository ("decrement iff stock >=
quantity"); this service adds the all-or-nothing guarantee across the
line items of one order.

Decrements are applied one product at a time. If any of them fails,
the ones already applied are re-incremented in reverse order before
the original error is re-raised, so a failed shipment never leaves
stock partially consumed.
"""

from __future__ import annotations

import structlog

from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class InventoryLedger:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    async def decrement(self, product_id: str, quantity: int) -> Product:
        """Take *quantity* units of one product out of stock.

        Raises EntityNotFoundError or InsufficientStockError; never
        clamps at zero.
        """
        product = await self._product_repo.decrement_stock(product_id, quantity)
        logger.info(
            "Stock decremented",
            product_id=product_id,
            quantity=quantity,
            stock=product.stock,
            sales=product.sales,
        )
        return product

    async def decrement_for_order(self, order: Order) -> None:
        """Decrement stock for every line item of *order*, all or nothing."""
        applied: list[tuple[str, int]] = []

        try:
            for product_id, qty in order.quantities_by_product().items():
                await self.decrement(product_id, qty)
                applied.append((product_id, qty))
        except BaseException:
            logger.warning(
                "Stock decrement failed, compensating",
                order_id=order.id,
                applied=len(applied),
            )
            await self._compensate(applied)
            raise

    async def restock_for_order(self, order: Order) -> None:
        """Put back everything ``decrement_for_order`` took for *order*."""
        await self._compensate(list(order.quantities_by_product().items()))

    async def _compensate(self, applied: list[tuple[str, int]]) -> None:
        for product_id, qty in reversed(applied):
            await self._product_repo.restock(product_id, qty)
            logger.info("Stock restored", product_id=product_id, quantity=qty)
