"""Domain models for users and identities."""

from dataclasses import dataclass
from enum import StrEnum


class Role(StrEnum):
    """User roles."""

    MEMBER = "member"
    ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    """Authenticated user without credentials."""

    id: str
    name: str
    role: Role
    photo: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class UserRecord:
    """Represents a user row stored in the database."""

    id: str
    name: str
    role: Role
    photo: str | None
    password: str

    def to_identity(self) -> Identity:
        """Return the identity, defaulting an empty name to ``User <id>``."""
        return Identity(
            id=self.id,
            name=self.name or f"User {self.id}",
            role=self.role,
            photo=self.photo,
        )
