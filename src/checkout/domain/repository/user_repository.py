"""Abstract repository for users (the credential store's view)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from checkout.domain.model.user import User


class UserRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: int) -> User | None:
        """Return a user by ID, or None if not found."""

    @abstractmethod
    def get_by_username(self, username: str) -> User | None:
        """Return a user by username, or None if not found."""

    @abstractmethod
    def save(self, user: User) -> None:
        """Persist a new or updated user, assigning an ID if new."""
