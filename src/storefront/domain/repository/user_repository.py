"""Abstract repository for the User aggregate (the credential store).

Confidentiality rule: every read returns a projection *without* the
password hash unless the caller passes ``include_secret=True``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.user import Role, User


class UserRepository(ABC):

    @abstractmethod
    async def add(self, user: User) -> User:
        """Persist a new user and assign its ID.

        Raises DuplicateEmailError if the email is already registered;
        the uniqueness check and the insert are one atomic step.
        """

    @abstractmethod
    async def get_by_email(self, email: str, include_secret: bool = False) -> User | None:
        """Return the user registered under *email*, or None."""

    @abstractmethod
    async def get_by_id(self, user_id: str, include_secret: bool = False) -> User | None:
        """Return a user by its ID, or None if not found."""

    @abstractmethod
    async def list_all(self) -> list[User]:
        """Return every user, without secrets."""

    @abstractmethod
    async def update_role(self, user_id: str, role: Role) -> User:
        """Change a user's role. Raises EntityNotFoundError if missing."""

    @abstractmethod
    async def update_password_hash(self, user_id: str, password_hash: str) -> None:
        """Replace a user's stored hash. Raises EntityNotFoundError if missing."""
