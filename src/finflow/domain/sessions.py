"""Domain models for client sessions."""

from dataclasses import dataclass
from datetime import datetime

from finflow.domain.models import Identity


@dataclass(frozen=True)
class Session:
    """The active session of this client process."""

    identity: Identity
    established_at: datetime
