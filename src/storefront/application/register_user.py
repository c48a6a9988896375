"""Application service: Register User use case.

Creates a customer account in the credential store and opens a
session for it, as the storefront signs people in right after sign-up.
"""

from __future__ import annotations

import asyncio

import structlog

from storefront.application.auth_gate import AuthGate
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.user import User
from storefront.domain.repository.user_repository import UserRepository
from storefront.infrastructure.security.password_hasher import PasswordHasher

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 8


class RegisterUserHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        hasher: PasswordHasher,
        auth: AuthGate,
    ) -> None:
        self._user_repo = user_repo
        self._hasher = hasher
        self._auth = auth

    async def handle(self, email: str, name: str, password: str) -> tuple[User, str]:
        """Register a new customer; return the user (without secret) and a session token.

        Raises DuplicateEmailError if the email is taken.
        """
        validate_password(password)

        password_hash = await asyncio.to_thread(self._hasher.hash, password)
        user = User.register(email=email, name=name, password_hash=password_hash)
        user = await self._user_repo.add(user)

        logger.info("User registered", user_id=user.id)
        return user.without_secret(), self._auth.issue_session(user)


def validate_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
