"""Application service: Auth Gate.

Turns an opaque session token into a live ``User`` and enforces role
requirements. Every use case that mutates orders, products or users
goes through ``authenticate`` followed by ``authorize``; "my own
records" reads go through ``authenticate`` plus an ownership check.

A session is valid only while all three hold: the signature verifies,
it has not expired, and the user it names still exists. The user is
re-read from the credential store on every call, so role changes and
removals take effect on the very next request.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from storefront.domain.exceptions import ForbiddenError, UnauthenticatedError
from storefront.domain.model.user import Role, User
from storefront.domain.repository.user_repository import UserRepository
from storefront.infrastructure.security.session_tokens import SessionTokenSigner

logger = structlog.get_logger(__name__)

ADMIN_ONLY = frozenset({Role.ADMIN})


class AuthGate:

    def __init__(self, user_repo: UserRepository, signer: SessionTokenSigner) -> None:
        self._user_repo = user_repo
        self._signer = signer

    def issue_session(self, user: User) -> str:
        if user.id is None:
            raise ValueError("Cannot issue a session for an unsaved user")
        return self._signer.issue(user.id)

    async def authenticate(self, token: str | None) -> User:
        if not token:
            raise UnauthenticatedError("Please Login to access this resource")

        claims = self._signer.verify(token)

        user = await self._user_repo.get_by_id(claims.user_id)
        if user is None:
            logger.info("Session refers to a missing user", token_id=claims.token_id)
            raise UnauthenticatedError("Invalid Token or Session Expired")
        return user

    def authorize(self, user: User, required_roles: Iterable[Role]) -> None:
        required = frozenset(required_roles)
        if user.role in required:
            return
        needed = " or ".join(sorted(r.value for r in required))
        logger.info("Access denied", user_id=user.id, role=user.role.value, required=needed)
        raise ForbiddenError(
            f"Role '{user.role.value}' is not allowed to access this resource; "
            f"requires {needed}"
        )

    async def require(self, token: str | None, required_roles: Iterable[Role]) -> User:
        """``authenticate`` then ``authorize`` in one call."""
        user = await self.authenticate(token)
        self.authorize(user, required_roles)
        return user
