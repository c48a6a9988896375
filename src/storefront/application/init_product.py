"""Application service: Initialize Product use case (admin)."""

from __future__ import annotations

import structlog

from storefront.application.auth_gate import ADMIN_ONLY, AuthGate
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class InitProductHandler:

    def __init__(self, product_repo: ProductRepository, auth: AuthGate) -> None:
        self._product_repo = product_repo
        self._auth = auth

    async def handle(
        self,
        token: str | None,
        name: str,
        price: int | str,
        description: str = "",
        category: str = "",
        stock: int = 0,
        images: list[str] | None = None,
    ) -> Product:
        """Create a product; the repository assigns its ID ("1" for the first)."""
        await self._auth.require(token, ADMIN_ONLY)

        if not name or not name.strip():
            raise ValidationError("Product name is required")

        product = Product(
            id=None,
            name=name.strip(),
            price=Money.of(price),
            description=description,
            category=category,
            stock=stock,
            images=list(images or []),
        )
        product = await self._product_repo.add(product)
        logger.info("Product initialized", product_id=product.id, stock=product.stock)
        return product
