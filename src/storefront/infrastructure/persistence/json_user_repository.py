"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from storefront.domain.exceptions import DuplicateEmailError, EntityNotFoundError
from storefront.domain.model.user import Role, User, normalize_email
from storefront.domain.repository.user_repository import UserRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonUserRepository(UserRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- UserRepository interface ---------------------------------------------

    async def add(self, user: User) -> User:
        async with self._file.lock:
            records = await self._file.load()
            email = normalize_email(user.email)
            if any(raw["email"] == email for raw in records):
                raise DuplicateEmailError("User already exists")

            user.id = uuid.uuid4().hex
            user.email = email
            records.append(self._to_raw(user))
            await self._file.persist(records)
        return user

    async def get_by_email(self, email: str, include_secret: bool = False) -> User | None:
        email = normalize_email(email)
        for raw in await self._file.load():
            if raw["email"] == email:
                return self._to_domain(raw, include_secret)
        return None

    async def get_by_id(self, user_id: str, include_secret: bool = False) -> User | None:
        for raw in await self._file.load():
            if raw["id"] == user_id:
                return self._to_domain(raw, include_secret)
        return None

    async def list_all(self) -> list[User]:
        return [self._to_domain(raw, include_secret=False) for raw in await self._file.load()]

    async def update_role(self, user_id: str, role: Role) -> User:
        async with self._file.lock:
            records = await self._file.load()
            raw = self._find(records, user_id)
            raw["role"] = role.value
            await self._file.persist(records)
        return self._to_domain(raw, include_secret=False)

    async def update_password_hash(self, user_id: str, password_hash: str) -> None:
        async with self._file.lock:
            records = await self._file.load()
            raw = self._find(records, user_id)
            raw["password"] = password_hash
            await self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _find(records: list[dict[str, Any]], user_id: str) -> dict[str, Any]:
        for raw in records:
            if raw["id"] == user_id:
                return raw
        raise EntityNotFoundError(f"User '{user_id}' not found")

    @staticmethod
    def _to_raw(user: User) -> dict[str, Any]:
        return {
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "role": user.role.value,
            "password": user.password_hash,
            "avatar": user.avatar,
            "created_at": user.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict[str, Any], include_secret: bool) -> User:
        return User(
            id=raw["id"],
            email=raw["email"],
            name=raw["name"],
            role=Role(raw["role"]),
            password_hash=raw.get("password") if include_secret else None,
            avatar=raw.get("avatar", ""),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
