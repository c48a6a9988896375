"""User aggregate and the closed set of roles."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from urllib.parse import quote_plus

from storefront.domain.exceptions import ValidationError

AVATAR_URL = "https://ui-avatars.com/api/?name={name}&background=D4AF37&color=000"


class Role(Enum):
    CUSTOMER = "user"
    ADMIN = "admin"

    @staticmethod
    def parse(raw: str) -> Role:
        try:
            return Role(raw)
        except ValueError:
            allowed = ", ".join(r.value for r in Role)
            raise ValidationError(f"Unknown role '{raw}' (expected one of: {allowed})")


@dataclass
class User:
    """A registered account.

    ``password_hash`` is ``None`` whenever the user was loaded without
    its secret; callers that need to verify a password must ask the
    repository for it explicitly.
    """

    id: str | None
    email: str
    name: str
    role: Role = Role.CUSTOMER
    password_hash: str | None = None
    avatar: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def register(email: str, name: str, password_hash: str) -> User:
        """Create a new customer account, enforcing input rules."""
        email = normalize_email(email)
        if "@" not in email:
            raise ValidationError(f"Invalid email address: '{email}'")
        if not name or not name.strip():
            raise ValidationError("Name is required")

        name = name.strip()
        return User(
            id=None,
            email=email,
            name=name,
            role=Role.CUSTOMER,
            password_hash=password_hash,
            avatar=AVATAR_URL.format(name=quote_plus(name)),
        )

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def change_role(self, role: Role) -> None:
        self.role = role

    def change_password_hash(self, password_hash: str) -> None:
        self.password_hash = password_hash

    def without_secret(self) -> User:
        """Projection safe to hand to anything outside the credential store."""
        return replace(self, password_hash=None)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()
