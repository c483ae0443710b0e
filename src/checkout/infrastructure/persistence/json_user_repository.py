"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

from pathlib import Path

from checkout.domain.model.user import Role, User
from checkout.domain.repository.user_repository import UserRepository
from checkout.infrastructure.persistence.json_file import JsonFile


class JsonUserRepository(UserRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=[])

    def get_by_id(self, user_id: int) -> User | None:
        for raw in self._file.load():
            if raw["id"] == user_id:
                return self._to_domain(raw)
        return None

    def get_by_username(self, username: str) -> User | None:
        for raw in self._file.load():
            if raw["username"].lower() == username.lower():
                return self._to_domain(raw)
        return None

    def save(self, user: User) -> None:
        with self._file.transaction() as users:
            new_id = user.id
            if new_id is None:
                new_id = max((u["id"] for u in users), default=0) + 1
            raw = self._to_raw(user, new_id)
            for i, existing in enumerate(users):
                if existing["id"] == new_id:
                    users[i] = raw
                    break
            else:
                users.append(raw)
        user.id = new_id

    @staticmethod
    def _to_raw(user: User, user_id: int) -> dict:
        return {
            "id": user_id,
            "username": user.username,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
            "role": user.role.value,
        }

    @staticmethod
    def _to_domain(raw: dict) -> User:
        return User(
            id=raw["id"],
            username=raw["username"],
            first_name=raw.get("first_name", ""),
            last_name=raw.get("last_name", ""),
            email=raw.get("email", ""),
            role=Role(raw.get("role", Role.CUSTOMER.value)),
        )
