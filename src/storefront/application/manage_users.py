"""Application services: user profile and account administration."""

from __future__ import annotations

import asyncio

import structlog

from storefront.application.auth_gate import ADMIN_ONLY, AuthGate
from storefront.application.register_user import validate_password
from storefront.domain.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    UnauthenticatedError,
)
from storefront.domain.model.user import Role, User
from storefront.domain.repository.user_repository import UserRepository
from storefront.infrastructure.security.password_hasher import PasswordHasher

logger = structlog.get_logger(__name__)


class ShowProfileHandler:

    def __init__(self, auth: AuthGate) -> None:
        self._auth = auth

    async def handle(self, token: str | None) -> User:
        """Return the signed-in user."""
        return await self._auth.authenticate(token)


class ListUsersHandler:

    def __init__(self, user_repo: UserRepository, auth: AuthGate) -> None:
        self._user_repo = user_repo
        self._auth = auth

    async def handle(self, token: str | None) -> list[User]:
        await self._auth.require(token, ADMIN_ONLY)
        return await self._user_repo.list_all()


class UpdateUserRoleHandler:

    def __init__(self, user_repo: UserRepository, auth: AuthGate) -> None:
        self._user_repo = user_repo
        self._auth = auth

    async def handle(self, token: str | None, user_id: str, role: str) -> User:
        admin = await self._auth.require(token, ADMIN_ONLY)
        new_role = Role.parse(role)

        user = await self._user_repo.update_role(user_id, new_role)
        logger.info("User role changed", user_id=user_id, role=new_role.value, by=admin.id)
        return user


class ChangePasswordHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        hasher: PasswordHasher,
        auth: AuthGate,
    ) -> None:
        self._user_repo = user_repo
        self._hasher = hasher
        self._auth = auth

    async def handle(self, token: str | None, old_password: str, new_password: str) -> None:
        user = await self._auth.authenticate(token)
        stored = await self._user_repo.get_by_id(user.id, include_secret=True)
        if stored is None:
            raise EntityNotFoundError(f"User '{user.id}' not found")

        if stored.password_hash is None or not await asyncio.to_thread(
            self._hasher.verify, stored.password_hash, old_password
        ):
            raise UnauthenticatedError("Old password is incorrect")

        validate_password(new_password)
        new_hash = await asyncio.to_thread(self._hasher.hash, new_password)
        await self._user_repo.update_password_hash(user.id, new_hash)
        logger.info("Password changed", user_id=user.id)


class BootstrapAdminHandler:
    """Promote the first administrator.

    Operator-only: it needs no session, so it refuses to run once any
    admin exists. From then on roles change through UpdateUserRoleHandler.
    """

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    async def handle(self, email: str) -> User:
        if any(u.is_admin for u in await self._user_repo.list_all()):
            raise ForbiddenError("An admin already exists; use an admin session to change roles")

        user = await self._user_repo.get_by_email(email)
        if user is None:
            raise EntityNotFoundError(f"No user registered as '{email}'")

        user = await self._user_repo.update_role(user.id, Role.ADMIN)
        logger.info("First admin promoted", user_id=user.id)
        return user
