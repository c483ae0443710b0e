"""Users as seen by the checkout core.

Credentials and login live elsewhere; orders only need to know who the
requester is and whether they are an administrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    CUSTOMER = "Customer"
    ADMIN = "Admin"


@dataclass
class User:
    id: int | None
    username: str
    first_name: str
    last_name: str
    email: str
    role: Role = Role.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
