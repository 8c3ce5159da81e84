"""Income and expense record-keeping."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from finflow.domain.money import parse_amount
from finflow.domain.transactions import (
    ALL,
    OwnedBy,
    Scope,
    TransactionKind,
    TransactionPatch,
    TransactionView,
)
from finflow.errors import ValidationError, WriteError

logger = logging.getLogger(__name__)


class TransactionRepository(Protocol):
    """Persistence interface for one transaction table."""

    kind: TransactionKind

    async def insert(
        self, owner_id: str, amount: Decimal, label: str
    ) -> TransactionView:
        """Insert a row and return it joined with the owner's name."""

    async def list(
        self, owner_id: str | None = None, limit: int | None = None
    ) -> list[TransactionView]:
        """Return rows newest first, optionally for one owner."""

    async def get(self, transaction_id: str) -> TransactionView | None:
        """Return a row by id, if present."""

    async def update(
        self, transaction_id: str, values: dict[str, object]
    ) -> TransactionView | None:
        """Apply a partial update and return the updated row."""

    async def delete(self, transaction_id: str) -> None:
        """Delete a row by id."""


def clean_label(raw: str | None) -> str:
    """Return the trimmed label or raise when it is blank."""
    cleaned = (raw or "").strip()
    if not cleaned:
        raise ValidationError("Description cannot be empty")
    return cleaned


@dataclass
class TransactionService:
    """Validated create/list/update/delete for one transaction kind."""

    repository: TransactionRepository

    @property
    def kind(self) -> TransactionKind:
        return self.repository.kind

    async def create(
        self, owner_id: str, amount: object, label: str
    ) -> TransactionView:
        """Validate and insert a transaction for ``owner_id``."""
        parsed_amount = parse_amount(amount)
        cleaned_label = clean_label(label)
        created = await self.repository.insert(owner_id, parsed_amount, cleaned_label)
        logger.info(
            "Transaction created",
            extra={"kind": str(self.kind), "transaction_id": created.id},
        )
        return created

    async def list(
        self, scope: Scope = ALL, limit: int | None = None
    ) -> list[TransactionView]:
        """Return transactions newest first for the given scope."""
        owner_id = scope.user_id if isinstance(scope, OwnedBy) else None
        rows = await self.repository.list(owner_id=owner_id, limit=limit)
        return sorted(rows, key=lambda row: row.created_at, reverse=True)

    async def get(self, transaction_id: str) -> TransactionView | None:
        """Return a transaction by id."""
        return await self.repository.get(transaction_id)

    async def update(
        self, transaction_id: str, patch: TransactionPatch
    ) -> TransactionView:
        """Change amount and/or label; identity fields are never touched."""
        values: dict[str, object] = {}
        if patch.amount is not None:
            values["amount"] = parse_amount(patch.amount)
        if patch.label is not None:
            values[self.kind.label_field] = clean_label(patch.label)
        if not values:
            raise ValidationError("Nothing to update")
        updated = await self.repository.update(transaction_id, values)
        if updated is None:
            raise WriteError(f"{self.kind} {transaction_id} not found")
        logger.info(
            "Transaction updated",
            extra={"kind": str(self.kind), "transaction_id": transaction_id},
        )
        return updated

    async def delete(self, transaction_id: str) -> None:
        """Permanently delete a transaction."""
        await self.repository.delete(transaction_id)
        logger.info(
            "Transaction deleted",
            extra={"kind": str(self.kind), "transaction_id": transaction_id},
        )
