"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions, plus the notification
bus, which is created here exactly once and handed to both the order
handlers and any observer connections.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from storefront.application.auth_gate import AuthGate
from storefront.application.create_order import CreateOrderHandler
from storefront.application.delete_order import DeleteOrderHandler
from storefront.application.init_product import InitProductHandler
from storefront.application.list_orders import ListAllOrdersHandler
from storefront.application.login_user import LoginUserHandler
from storefront.application.manage_users import (
    BootstrapAdminHandler,
    ChangePasswordHandler,
    ListUsersHandler,
    ShowProfileHandler,
    UpdateUserRoleHandler,
)
from storefront.application.register_user import RegisterUserHandler
from storefront.application.show_order import ListMyOrdersHandler, ShowOrderHandler
from storefront.application.show_product import ShowProductHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.config import Settings
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.infrastructure.notifications.bus import NotificationBus
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from storefront.infrastructure.persistence.json_user_repository import (
    JsonUserRepository,
)
from storefront.infrastructure.security.password_hasher import PasswordHasher
from storefront.infrastructure.security.session_tokens import SessionTokenSigner

logger = structlog.get_logger(__name__)


@dataclass
class Storefront:
    """Every use case, wired to one set of repositories and one bus."""

    bus: NotificationBus
    auth: AuthGate
    register_user: RegisterUserHandler
    login_user: LoginUserHandler
    show_profile: ShowProfileHandler
    change_password: ChangePasswordHandler
    list_users: ListUsersHandler
    update_user_role: UpdateUserRoleHandler
    bootstrap_admin: BootstrapAdminHandler
    init_product: InitProductHandler
    show_product: ShowProductHandler
    update_product: UpdateProductHandler
    create_order: CreateOrderHandler
    show_order: ShowOrderHandler
    list_my_orders: ListMyOrdersHandler
    list_all_orders: ListAllOrdersHandler
    update_order_status: UpdateOrderStatusHandler
    delete_order: DeleteOrderHandler

    async def start(self) -> None:
        await self.bus.start()
        self.bus.subscribe(_log_notification)

    async def shutdown(self) -> None:
        await self.bus.shutdown()


async def _log_notification(message: dict[str, Any]) -> None:
    logger.info("Admin notification", type=message["type"], **message["payload"])


def build_storefront(settings: Settings) -> Storefront:
    if not settings.session_secret:
        raise RuntimeError("STOREFRONT_SESSION_SECRET is not set")

    users = JsonUserRepository(settings.data_dir / "users.json")
    products = JsonProductRepository(settings.data_dir / "products.json")
    orders = JsonOrderRepository(settings.data_dir / "orders.json")

    hasher = PasswordHasher()
    auth = AuthGate(users, SessionTokenSigner(settings.session_secret, settings.session_ttl_seconds))
    bus = NotificationBus(settings.notification_timeout_seconds)
    ledger = InventoryLedger(products)

    return Storefront(
        bus=bus,
        auth=auth,
        register_user=RegisterUserHandler(users, hasher, auth),
        login_user=LoginUserHandler(users, hasher, auth),
        show_profile=ShowProfileHandler(auth),
        change_password=ChangePasswordHandler(users, hasher, auth),
        list_users=ListUsersHandler(users, auth),
        update_user_role=UpdateUserRoleHandler(users, auth),
        bootstrap_admin=BootstrapAdminHandler(users),
        init_product=InitProductHandler(products, auth),
        show_product=ShowProductHandler(products),
        update_product=UpdateProductHandler(products, auth),
        create_order=CreateOrderHandler(orders, products, auth, bus),
        show_order=ShowOrderHandler(orders, auth),
        list_my_orders=ListMyOrdersHandler(orders, auth),
        list_all_orders=ListAllOrdersHandler(orders, auth),
        update_order_status=UpdateOrderStatusHandler(orders, ledger, auth),
        delete_order=DeleteOrderHandler(orders, auth),
    )
