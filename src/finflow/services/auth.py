"""Credential verification against the remote user table."""

import hmac
import logging
from dataclasses import dataclass
from typing import Protocol

import bcrypt

from finflow.domain.models import Identity, UserRecord
from finflow.errors import FetchError, InvalidCredentials, ValidationError, WriteError

logger = logging.getLogger(__name__)

HASH_ROUNDS = 12
HASH_PREFIXES = ("$2a$", "$2b$", "$2y$")
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72


class UserRepository(Protocol):
    """Persistence interface for user data."""

    async def get_user(self, user_id: str) -> UserRecord | None:
        """Return the user row for an id, if present."""

    async def list_users(self) -> list[UserRecord]:
        """Return all users."""

    async def update_name(self, user_id: str, name: str) -> None:
        """Update a user's display name."""

    async def update_password(self, user_id: str, password: str) -> None:
        """Replace a user's stored secret."""


def hash_secret(secret: str, rounds: int = HASH_ROUNDS) -> str:
    """Return a bcrypt hash of ``secret``."""
    salt = bcrypt.gensalt(rounds)
    return bcrypt.hashpw(secret.encode("utf-8"), salt).decode("utf-8")


def verify_secret(stored: str, presented: str) -> bool:
    """Compare a presented secret with a stored bcrypt hash or legacy plaintext."""
    if not stored:
        return False
    if stored.startswith(HASH_PREFIXES):
        encoded = presented.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, stored.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False
    # Legacy rows hold the plaintext secret until the next password change.
    return hmac.compare_digest(stored.encode(), presented.encode())


@dataclass
class Authenticator:
    """Validates identifier/secret pairs and manages passwords."""

    repository: UserRepository

    async def authenticate(self, identifier: str, secret: str) -> Identity:
        """Return the identity for valid credentials or raise InvalidCredentials."""
        try:
            user = await self.repository.get_user(identifier)
        except FetchError:
            logger.exception("User lookup failed", extra={"user_id": identifier})
            raise InvalidCredentials from None
        if user is None or not verify_secret(user.password, secret):
            raise InvalidCredentials
        return user.to_identity()

    async def change_password(
        self, identity: Identity, current: str, new: str, confirmation: str
    ) -> None:
        """Verify the current secret and store a hash of the new one."""
        if new != confirmation:
            raise ValidationError("New passwords do not match.")
        if len(new) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )
        if len(new.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes long."
            )
        try:
            user = await self.repository.get_user(identity.id)
        except FetchError as exc:
            raise WriteError("Failed to update password") from exc
        if user is None or not verify_secret(user.password, current):
            raise ValidationError("Current password is incorrect.")
        await self.repository.update_password(identity.id, hash_secret(new))
        logger.info("Password changed", extra={"user_id": identity.id})

    async def update_name(self, identity: Identity, name: str) -> Identity:
        """Persist a new display name and return the updated identity."""
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError("Name cannot be empty.")
        await self.repository.update_name(identity.id, cleaned)
        return Identity(
            id=identity.id, name=cleaned, role=identity.role, photo=identity.photo
        )
