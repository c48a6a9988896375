"""JSON-file-backed implementation of OrderRepository.

Transition claims are held in memory, so the check-and-set guard covers
concurrent requests served by the same process.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import (
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentInfo,
    ShippingInfo,
)
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)
        self._claims: set[int] = set()

    # --- OrderRepository interface --------------------------------------------

    async def add(self, order: Order) -> Order:
        async with self._file.lock:
            orders = await self._file.load()
            order.id = max((o["id"] for o in orders), default=0) + 1
            orders.append(self._to_raw(order))
            await self._file.persist(orders)
        return order

    async def get_by_id(self, order_id: int) -> Order | None:
        for raw in await self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    async def list_by_user(self, user_id: str) -> list[Order]:
        return [self._to_domain(raw) for raw in await self._file.load() if raw["user"] == user_id]

    async def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in await self._file.load()]

    async def delete(self, order_id: int) -> bool:
        async with self._file.lock:
            orders = await self._file.load()
            remaining = [o for o in orders if o["id"] != order_id]
            if len(remaining) == len(orders):
                return False
            await self._file.persist(remaining)
        return True

    async def try_claim(self, order_id: int, expected_status: OrderStatus) -> bool:
        async with self._file.lock:
            if order_id in self._claims:
                return False
            for raw in await self._file.load():
                if raw["id"] == order_id:
                    if raw["orderStatus"] != expected_status.value:
                        return False
                    self._claims.add(order_id)
                    return True
        return False

    async def commit(self, order: Order) -> None:
        async with self._file.lock:
            try:
                orders = await self._file.load()
                for i, raw in enumerate(orders):
                    if raw["id"] == order.id:
                        orders[i] = self._to_raw(order)
                        break
                else:
                    raise EntityNotFoundError(f"Order #{order.id} not found")
                await self._file.persist(orders)
            finally:
                self._claims.discard(order.id)

    async def release(self, order_id: int) -> None:
        async with self._file.lock:
            self._claims.discard(order_id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict[str, Any]:
        return {
            "id": order.id,
            "user": order.user_id,
            "orderItems": [
                {
                    "product": item.product_id,
                    "name": item.name,
                    "quantity": item.quantity.value,
                    "price": item.unit_price.amount,
                    "currency": item.unit_price.currency,
                    "image": item.image,
                }
                for item in order.items
            ],
            "shippingInfo": {
                "address": order.shipping_info.address,
                "city": order.shipping_info.city,
                "state": order.shipping_info.state,
                "country": order.shipping_info.country,
                "pinCode": order.shipping_info.pin_code,
                "phoneNo": order.shipping_info.phone_no,
            },
            "paymentInfo": {"id": order.payment_info.id, "status": order.payment_info.status},
            "itemsPrice": order.items_price.amount,
            "taxPrice": order.tax_price.amount,
            "shippingPrice": order.shipping_price.amount,
            "totalPrice": order.total_price.amount,
            "currency": order.total_price.currency,
            "orderStatus": order.status.value,
            "createdAt": order.created_at.isoformat(),
            "paidAt": order.paid_at.isoformat() if order.paid_at else None,
            "deliveredAt": order.delivered_at.isoformat() if order.delivered_at else None,
        }

    @staticmethod
    def _to_domain(raw: dict[str, Any]) -> Order:
        currency = raw.get("currency", "INR")
        items = [
            OrderLineItem(
                product_id=i["product"],
                name=i.get("name", ""),
                quantity=Quantity(i["quantity"]),
                unit_price=Money(i["price"], i.get("currency", currency)),
                image=i.get("image", ""),
            )
            for i in raw["orderItems"]
        ]
        shipping = raw["shippingInfo"]
        return Order(
            id=raw["id"],
            user_id=raw["user"],
            items=items,
            shipping_info=ShippingInfo(
                address=shipping["address"],
                city=shipping["city"],
                state=shipping["state"],
                country=shipping["country"],
                pin_code=shipping["pinCode"],
                phone_no=shipping["phoneNo"],
            ),
            payment_info=PaymentInfo(**raw["paymentInfo"]),
            items_price=Money(raw["itemsPrice"], currency),
            tax_price=Money(raw["taxPrice"], currency),
            shipping_price=Money(raw["shippingPrice"], currency),
            total_price=Money(raw["totalPrice"], currency),
            status=OrderStatus(raw["orderStatus"]),
            created_at=datetime.fromisoformat(raw["createdAt"]),
            paid_at=datetime.fromisoformat(raw["paidAt"]) if raw.get("paidAt") else None,
            delivered_at=(
                datetime.fromisoformat(raw["deliveredAt"]) if raw.get("deliveredAt") else None
            ),
        )
