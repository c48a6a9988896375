"""Unit tests for the InventoryLedger domain service."""

import asyncio

import pytest

from storefront.domain.exceptions import EntityNotFoundError, InsufficientStockError
from storefront.domain.model.order import Order, OrderLineItem, PaymentInfo, ShippingInfo
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import FakeProductRepository, make_product


def _order(lines: list[tuple[str, int]]) -> Order:
    items = [
        OrderLineItem(product_id=pid, name=pid, quantity=Quantity(qty), unit_price=Money(10))
        for pid, qty in lines
    ]
    total = sum(qty for _, qty in lines) * 10
    return Order.create(
        user_id="u1",
        items=items,
        shipping_info=ShippingInfo("a", "b", "c", "d", "560001", "99"),
        payment_info=PaymentInfo("pay", "succeeded"),
        items_price=Money(total),
        tax_price=Money(0),
        shipping_price=Money(0),
        total_price=Money(total),
    )


def _setup(*stocks: int):
    repo = FakeProductRepository(
        [make_product(str(i + 1), f"P{i + 1}", stock=s) for i, s in enumerate(stocks)]
    )
    return repo, InventoryLedger(repo)


class TestDecrement:

    async def test_decrement_updates_stock_and_sales(self):
        repo, ledger = _setup(5)
        await ledger.decrement("1", 2)
        p = await repo.get_by_id("1")
        assert (p.stock, p.sales) == (3, 2)

    async def test_unknown_product(self):
        _, ledger = _setup(5)
        with pytest.raises(EntityNotFoundError):
            await ledger.decrement("nope", 1)

    async def test_insufficient_stock_leaves_product_untouched(self):
        repo, ledger = _setup(1)
        with pytest.raises(InsufficientStockError):
            await ledger.decrement("1", 2)
        p = await repo.get_by_id("1")
        assert (p.stock, p.sales) == (1, 0)

    async def test_concurrent_decrements_never_oversell(self):
        repo, ledger = _setup(5)

        async def attempt():
            try:
                await ledger.decrement("1", 2)
                return True
            except InsufficientStockError:
                return False

        results = await asyncio.gather(*(attempt() for _ in range(6)))
        p = await repo.get_by_id("1")
        assert sum(results) == 2
        assert p.stock == 1
        assert p.sales == 4


class TestDecrementForOrder:

    async def test_all_items_decremented(self):
        repo, ledger = _setup(5, 5)
        await ledger.decrement_for_order(_order([("1", 2), ("2", 3)]))
        assert (await repo.get_by_id("1")).stock == 3
        assert (await repo.get_by_id("2")).stock == 2

    async def test_partial_failure_is_compensated(self):
        repo, ledger = _setup(5, 1)
        with pytest.raises(InsufficientStockError):
            await ledger.decrement_for_order(_order([("1", 2), ("2", 3)]))
        p1 = await repo.get_by_id("1")
        p2 = await repo.get_by_id("2")
        assert (p1.stock, p1.sales) == (5, 0)
        assert (p2.stock, p2.sales) == (1, 0)

    async def test_storage_fault_is_compensated_and_propagates(self):
        repo, ledger = _setup(5, 5)
        repo.fail_on.add("2")
        with pytest.raises(OSError):
            await ledger.decrement_for_order(_order([("1", 2), ("2", 1)]))
        assert (await repo.get_by_id("1")).stock == 5

    async def test_repeated_product_lines_are_checked_together(self):
        repo, ledger = _setup(3)
        with pytest.raises(InsufficientStockError):
            await ledger.decrement_for_order(_order([("1", 2), ("1", 2)]))
        assert (await repo.get_by_id("1")).stock == 3

    async def test_restock_for_order(self):
        repo, ledger = _setup(5)
        order = _order([("1", 2)])
        await ledger.decrement_for_order(order)
        await ledger.restock_for_order(order)
        p = await repo.get_by_id("1")
        assert (p.stock, p.sales) == (5, 0)
