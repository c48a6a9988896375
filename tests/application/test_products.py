"""Integration tests for product administration and lookup."""

import asyncio

import pytest

from storefront.application.dto import product_to_dict
from storefront.application.init_product import InitProductHandler
from storefront.application.show_product import ShowProductHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    ValidationError,
)
from storefront.domain.model.user import Role
from storefront.domain.model.value_objects import Money
from tests.fakes import build_world


async def _admin_world(products=None):
    world = await build_world(products if products is not None else [])
    _, token = await world.add_user("admin@example.com", role=Role.ADMIN)
    return world, token


class TestInitProduct:

    async def test_first_product_gets_id_one(self):
        world, token = await _admin_world()

        product = await InitProductHandler(world.products, world.auth).handle(
            token, "Gold Pendant", 100, stock=5, images=["pendant.jpg"]
        )

        assert product.id == "1"
        assert product.price == Money(100)
        stored = await world.products.get_by_id("1")
        assert (stored.stock, stored.sales) == (5, 0)

    async def test_ids_increment(self):
        world, token = await _admin_world()
        handler = InitProductHandler(world.products, world.auth)
        await handler.handle(token, "Gold Pendant", 100)
        second = await handler.handle(token, "Silver Ring", "250")
        assert second.id == "2"
        assert second.price == Money(250)

    async def test_duplicate_name_rejected(self):
        world, token = await _admin_world()
        handler = InitProductHandler(world.products, world.auth)
        await handler.handle(token, "Gold Pendant", 100)
        with pytest.raises(ValidationError, match="already exists"):
            await handler.handle(token, "gold pendant", 120)

    async def test_concurrent_inits_get_distinct_ids(self):
        world, token = await _admin_world()
        handler = InitProductHandler(world.products, world.auth)

        first, second = await asyncio.gather(
            handler.handle(token, "Gold Pendant", 100),
            handler.handle(token, "Silver Ring", 250),
        )

        assert {first.id, second.id} == {"1", "2"}
        assert (await world.products.get_by_id(first.id)).name == "Gold Pendant"
        assert (await world.products.get_by_id(second.id)).name == "Silver Ring"

    async def test_concurrent_inits_with_same_name_keep_one(self):
        world, token = await _admin_world()
        handler = InitProductHandler(world.products, world.auth)

        results = await asyncio.gather(
            handler.handle(token, "Gold Pendant", 100),
            handler.handle(token, "Gold Pendant", 120),
            return_exceptions=True,
        )

        assert sum(isinstance(r, ValidationError) for r in results) == 1
        assert (await world.products.get_by_id("1")).price == Money(100)
        assert await world.products.get_by_id("2") is None

    async def test_zero_price_rejected(self):
        world, token = await _admin_world()
        with pytest.raises(ValidationError):
            await InitProductHandler(world.products, world.auth).handle(token, "Free", 0)

    async def test_customer_forbidden(self):
        world = await build_world([])
        _, token = await world.add_user("asha@example.com")
        with pytest.raises(ForbiddenError):
            await InitProductHandler(world.products, world.auth).handle(token, "Gold", 100)


class TestShowProduct:

    async def test_found(self):
        world = await build_world()
        product = await ShowProductHandler(world.products).handle("1")
        data = product_to_dict(product)
        assert data["name"] == "Gold Pendant"
        assert data["price"] == 100
        assert data["stock"] == 5

    async def test_missing(self):
        world = await build_world()
        with pytest.raises(EntityNotFoundError):
            await ShowProductHandler(world.products).handle("9")


class TestUpdateProduct:

    async def test_updates_only_given_fields(self):
        world, token = await _admin_world(None)
        await InitProductHandler(world.products, world.auth).handle(
            token, "Gold Pendant", 100, description="22k", stock=5
        )

        updated = await UpdateProductHandler(world.products, world.auth).handle(
            token, "1", price=150
        )

        assert updated.price == Money(150)
        assert updated.description == "22k"
        assert updated.stock == 5

    async def test_negative_stock_rejected(self):
        world, token = await _admin_world(None)
        await InitProductHandler(world.products, world.auth).handle(token, "Gold", 100, stock=5)
        with pytest.raises(ValidationError):
            await UpdateProductHandler(world.products, world.auth).handle(token, "1", stock=-1)
        assert (await world.products.get_by_id("1")).stock == 5

    async def test_edit_does_not_undo_concurrent_decrement(self):
        world, token = await _admin_world(None)
        await InitProductHandler(world.products, world.auth).handle(token, "Gold", 100, stock=5)

        await asyncio.gather(
            world.ledger.decrement("1", 2),
            UpdateProductHandler(world.products, world.auth).handle(token, "1", description="new"),
        )

        product = await world.products.get_by_id("1")
        assert (product.stock, product.sales) == (3, 2)
        assert product.description == "new"

    async def test_missing_product(self):
        world, token = await _admin_world()
        with pytest.raises(EntityNotFoundError):
            await UpdateProductHandler(world.products, world.auth).handle(token, "7", price=10)
