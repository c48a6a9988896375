"""Application service: Login use case.

Wrong email and wrong password fail with the exact same error, and both
pay for one password verification, so neither the response nor its
timing reveals whether an account exists.
"""

from __future__ import annotations

import asyncio

import structlog

from storefront.application.auth_gate import AuthGate
from storefront.domain.exceptions import UnauthenticatedError, ValidationError
from storefront.domain.model.user import User
from storefront.domain.repository.user_repository import UserRepository
from storefront.infrastructure.security.password_hasher import PasswordHasher

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

_DUMMY_PASSWORD = "storefront-login-timing-equalizer"


class LoginUserHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        hasher: PasswordHasher,
        auth: AuthGate,
    ) -> None:
        self._user_repo = user_repo
        self._hasher = hasher
        self._auth = auth
        self._dummy_hash: str | None = None

    async def handle(self, email: str, password: str) -> tuple[User, str]:
        if not email or not password:
            raise ValidationError("Please enter email and password")

        user = await self._user_repo.get_by_email(email, include_secret=True)
        if user is None or user.password_hash is None:
            # same cost as a wrong password for a known email
            await asyncio.to_thread(self._hasher.verify, await self._get_dummy_hash(), password)
            logger.info("Login failed")
            raise UnauthenticatedError(INVALID_CREDENTIALS)

        if not await asyncio.to_thread(self._hasher.verify, user.password_hash, password):
            logger.info("Login failed", user_id=user.id)
            raise UnauthenticatedError(INVALID_CREDENTIALS)

        if self._hasher.needs_rehash(user.password_hash):
            new_hash = await asyncio.to_thread(self._hasher.hash, password)
            await self._user_repo.update_password_hash(user.id, new_hash)

        logger.info("User logged in", user_id=user.id)
        return user.without_secret(), self._auth.issue_session(user)

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await asyncio.to_thread(self._hasher.hash, _DUMMY_PASSWORD)
        return self._dummy_hash
