"""Data Transfer Objects: plain containers that cross layer boundaries.

Incoming wire payloads use the storefront's camelCase JSON shape
(``orderItems``, ``shippingInfo``, ``pinCode`` ...). The parsers below
turn them into domain value objects; the ``*_to_dict`` helpers render
domain objects back into that shape. Password hashes are never part of
any output.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Order, PaymentInfo, ShippingInfo
from storefront.domain.model.product import Product
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one cart line as submitted at checkout."""

    product_id: str
    quantity: int
    price: int
    name: str = ""
    image: str = ""


@dataclass(frozen=True)
class NewOrderRequest:
    """Input: a complete checkout submission."""

    items: list[OrderItemSpec]
    shipping_info: ShippingInfo
    payment_info: PaymentInfo
    items_price: int
    tax_price: int
    shipping_price: int
    total_price: int


# --- Parsing ----------------------------------------------------------------


def parse_new_order(payload: dict[str, Any]) -> NewOrderRequest:
    """Parse the order-creation body into a NewOrderRequest."""
    if not isinstance(payload, dict):
        raise ValidationError("Order payload must be a JSON object")

    raw_items = payload.get("orderItems")
    if not isinstance(raw_items, list):
        raise ValidationError("orderItems must be a list")

    items = [_parse_item(raw) for raw in raw_items]

    shipping = payload.get("shippingInfo")
    if not isinstance(shipping, dict):
        raise ValidationError("shippingInfo is required")
    shipping_info = ShippingInfo(
        address=_text(shipping.get("address")),
        city=_text(shipping.get("city")),
        state=_text(shipping.get("state")),
        country=_text(shipping.get("country")),
        pin_code=_text(shipping.get("pinCode")),
        phone_no=_text(shipping.get("phoneNo")),
    )

    payment = payload.get("paymentInfo") or {}
    if not isinstance(payment, dict):
        raise ValidationError("paymentInfo must be an object")
    payment_info = PaymentInfo(
        id=_text(payment.get("id")),
        status=_text(payment.get("status")),
    )

    return NewOrderRequest(
        items=items,
        shipping_info=shipping_info,
        payment_info=payment_info,
        items_price=_amount(payload, "itemsPrice"),
        tax_price=_amount(payload, "taxPrice"),
        shipping_price=_amount(payload, "shippingPrice"),
        total_price=_amount(payload, "totalPrice"),
    )


def _parse_item(raw: Any) -> OrderItemSpec:
    if not isinstance(raw, dict):
        raise ValidationError("Each order item must be an object")
    product = raw.get("product")
    if product is None or str(product).strip() == "":
        raise ValidationError("Order item is missing its product")
    quantity = raw.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"Invalid quantity for product '{product}': {quantity!r}")
    return OrderItemSpec(
        product_id=str(product),
        quantity=quantity,
        price=Money.of(raw.get("price")).amount,
        name=_text(raw.get("name")),
        image=_text(raw.get("image")),
    )


def _amount(payload: dict[str, Any], key: str) -> int:
    if key not in payload:
        raise ValidationError(f"{key} is required")
    return Money.of(payload[key]).amount


def _text(value: Any) -> str:
    return "" if value is None else str(value)


# --- Rendering --------------------------------------------------------------


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def order_to_dict(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "user": order.user_id,
        "orderItems": [
            {
                "product": item.product_id,
                "name": item.name,
                "quantity": item.quantity.value,
                "price": item.unit_price.amount,
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
        "paymentInfo": {
            "id": order.payment_info.id,
            "status": order.payment_info.status,
        },
        "itemsPrice": order.items_price.amount,
        "taxPrice": order.tax_price.amount,
        "shippingPrice": order.shipping_price.amount,
        "totalPrice": order.total_price.amount,
        "orderStatus": order.status.value,
        "createdAt": _iso(order.created_at),
        "paidAt": _iso(order.paid_at),
        "deliveredAt": _iso(order.delivered_at),
    }


def order_listing_to_dict(orders: list[Order], total: Money) -> dict[str, Any]:
    """Admin listing shape: ``{"orders": [...], "totalAmount": n}``."""
    return {
        "orders": [order_to_dict(o) for o in orders],
        "totalAmount": total.amount,
    }


def order_summary(order: Order, purchaser: User) -> dict[str, Any]:
    """Creation summary carried by the new-order notification."""
    return {
        "orderId": order.id,
        "user": purchaser.name,
        "totalPrice": order.total_price.amount,
        "itemCount": sum(item.quantity.value for item in order.items),
    }


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "avatar": user.avatar,
        "createdAt": _iso(user.created_at),
    }


def product_to_dict(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price.amount,
        "description": product.description,
        "category": product.category,
        "stock": product.stock,
        "sales": product.sales,
        "images": list(product.images),
    }
