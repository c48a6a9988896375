"""Application service: Update Product use case (admin)."""

from __future__ import annotations

import structlog

from storefront.application.auth_gate import ADMIN_ONLY, AuthGate
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository, auth: AuthGate) -> None:
        self._product_repo = product_repo
        self._auth = auth

    async def handle(
        self,
        token: str | None,
        product_id: str,
        price: int | str | None = None,
        stock: int | None = None,
        description: str | None = None,
        category: str | None = None,
        images: list[str] | None = None,
    ) -> Product:
        """Edit a product; fields left as None are unchanged.

        A new price does NOT affect any existing orders because they
        captured a price snapshot at creation time. The edit is applied
        atomically so it cannot overwrite a concurrent stock decrement.
        """
        await self._auth.require(token, ADMIN_ONLY)
        new_price = Money.of(price) if price is not None else None

        def change(product: Product) -> None:
            if new_price is not None:
                product.update_price(new_price)
            if stock is not None:
                product.set_stock(stock)
            if description is not None:
                product.description = description
            if category is not None:
                product.category = category
            if images is not None:
                product.images = list(images)

        product = await self._product_repo.update(product_id, change)
        logger.info("Product updated", product_id=product_id)
        return product
