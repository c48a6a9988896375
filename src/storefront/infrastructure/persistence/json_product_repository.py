"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    async def get_by_id(self, product_id: str) -> Product | None:
        for raw in await self._file.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    async def add(self, product: Product) -> Product:
        async with self._file.lock:
            records = await self._file.load()
            if any(raw["name"].lower() == product.name.lower() for raw in records):
                raise ValidationError(f"Product '{product.name}' already exists")

            product.id = str(max((int(raw["id"]) for raw in records), default=0) + 1)
            records.append(self._to_raw(product))
            await self._file.persist(records)
        return product

    async def update(self, product_id: str, change: Callable[[Product], None]) -> Product:
        async with self._file.lock:
            records = await self._file.load()
            for i, raw in enumerate(records):
                if raw["id"] == product_id:
                    product = self._to_domain(raw)
                    change(product)
                    records[i] = self._to_raw(product)
                    await self._file.persist(records)
                    return product
        raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

    async def decrement_stock(self, product_id: str, quantity: int) -> Product:
        return await self.update(product_id, lambda p: p.decrement_stock(quantity))

    async def restock(self, product_id: str, quantity: int) -> Product:
        return await self.update(product_id, lambda p: p.restock(quantity))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict[str, Any]:
        return {
            "id": product.id,
            "name": product.name,
            "price": product.price.amount,
            "currency": product.price.currency,
            "description": product.description,
            "category": product.category,
            "stock": product.stock,
            "sales": product.sales,
            "images": list(product.images),
        }

    @staticmethod
    def _to_domain(raw: dict[str, Any]) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            price=Money(raw["price"], raw.get("currency", "INR")),
            description=raw.get("description", ""),
            category=raw.get("category", ""),
            stock=raw.get("stock", 0),
            sales=raw.get("sales", 0),
            images=list(raw.get("images", [])),
        )
