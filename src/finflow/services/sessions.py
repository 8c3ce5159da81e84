"""Client session persistence and login/logout lifecycle."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from finflow.domain.models import Identity, Role
from finflow.domain.sessions import Session
from finflow.services.auth import Authenticator

logger = logging.getLogger(__name__)

SESSION_KEY = "finflow_user"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class KeyValueStorage(Protocol):
    """Local key-value persistence."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""


class StoredIdentity(BaseModel):
    """Serialized identity kept in local storage."""

    id: str
    name: str
    role: Role
    photo: str | None = None

    @classmethod
    def from_identity(cls, identity: Identity) -> "StoredIdentity":
        return cls(
            id=identity.id,
            name=identity.name,
            role=identity.role,
            photo=identity.photo,
        )

    def to_identity(self) -> Identity:
        return Identity(id=self.id, name=self.name, role=self.role, photo=self.photo)


@dataclass
class SessionStore:
    """Persists the current identity under a single key."""

    storage: KeyValueStorage
    key: str = SESSION_KEY

    def restore(self) -> Identity | None:
        """Return the persisted identity, treating corrupt records as absent."""
        raw = self.storage.get(self.key)
        if raw is None:
            return None
        try:
            stored = StoredIdentity.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError):
            logger.warning("Discarding unreadable session record")
            self.storage.delete(self.key)
            return None
        return stored.to_identity()

    def save(self, identity: Identity) -> None:
        """Persist an identity."""
        payload = StoredIdentity.from_identity(identity).model_dump(mode="json")
        self.storage.set(self.key, json.dumps(payload))

    def clear(self) -> None:
        """Remove the persisted identity."""
        self.storage.delete(self.key)


@dataclass
class SessionService:
    """Establishes and tears down the process session."""

    store: SessionStore
    authenticator: Authenticator
    clock: Callable[[], datetime] = field(default=_utc_now, repr=False)

    def start(self) -> Session | None:
        """Restore the session persisted by a previous run."""
        identity = self.store.restore()
        if identity is None:
            return None
        logger.info("Session restored", extra={"user_id": identity.id})
        return Session(identity=identity, established_at=self.clock())

    async def login(self, identifier: str, secret: str) -> Session:
        """Authenticate and persist a new session."""
        identity = await self.authenticator.authenticate(identifier, secret)
        self.store.save(identity)
        logger.info("Login succeeded", extra={"user_id": identity.id})
        return Session(identity=identity, established_at=self.clock())

    def refresh(self, session: Session, identity: Identity) -> Session:
        """Persist an updated identity and return the replacement session."""
        self.store.save(identity)
        return Session(identity=identity, established_at=session.established_at)

    def logout(self) -> None:
        """Forget the persisted session."""
        self.store.clear()
