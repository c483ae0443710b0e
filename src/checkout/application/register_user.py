"""Application service: Register User use case."""

from __future__ import annotations

from checkout.domain.exceptions import (
    InvalidRequestError,
    PersistenceFailedError,
    StorageError,
)
from checkout.domain.model.user import Role, User
from checkout.domain.repository.user_repository import UserRepository


class RegisterUserHandler:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def handle(
        self,
        username: str,
        first_name: str,
        last_name: str,
        email: str,
        admin: bool = False,
    ) -> User:
        if not username or not username.strip():
            raise InvalidRequestError("Username is required")
        if "@" not in email:
            raise InvalidRequestError(f"Invalid email address: {email!r}")
        try:
            existing = self._user_repo.get_by_username(username.strip())
        except StorageError as exc:
            raise PersistenceFailedError("Could not read users") from exc
        if existing is not None:
            raise InvalidRequestError(f"Username '{username}' already exists")

        user = User(
            id=None,
            username=username.strip(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email.strip(),
            role=Role.ADMIN if admin else Role.CUSTOMER,
        )
        try:
            self._user_repo.save(user)
        except StorageError as exc:
            raise PersistenceFailedError(f"Could not store user '{user.username}'") from exc
        return user
