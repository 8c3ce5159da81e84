"""Supabase repository for the income and expenses tables."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient

from finflow.domain.money import to_decimal
from finflow.domain.transactions import TransactionKind, TransactionView
from finflow.errors import FetchError, WriteError
from finflow.services.transactions import TransactionRepository

logger = logging.getLogger(__name__)


@dataclass
class SupabaseTransactionRepository(TransactionRepository):
    """Supabase implementation for one transaction table."""

    client: AsyncClient
    kind: TransactionKind

    @property
    def _columns(self) -> str:
        return (
            f"id, amount, {self.kind.label_field}, user_id, created_at, "
            "users!inner(name)"
        )

    async def insert(
        self, owner_id: str, amount: Decimal, label: str
    ) -> TransactionView:
        """Insert a row and return it joined with the owner's name."""
        try:
            response = (
                await self.client.table(self.kind.table)
                .insert(
                    {
                        "user_id": owner_id,
                        "amount": str(amount),
                        self.kind.label_field: label,
                    }
                )
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise WriteError(f"Failed to create {self.kind}") from exc
        if not response.data:
            raise WriteError(f"Failed to create {self.kind}")
        row = response.data[0]
        return await self._read_back(str(row["id"]), row)

    async def list(
        self, owner_id: str | None = None, limit: int | None = None
    ) -> list[TransactionView]:
        """Return rows newest first, optionally for one owner."""
        query = self.client.table(self.kind.table).select(self._columns)
        if owner_id is not None:
            query = query.eq("user_id", owner_id)
        query = query.order("created_at", desc=True)
        if limit is not None:
            query = query.limit(limit)
        try:
            response = await query.execute()
        except (APIError, httpx.HTTPError) as exc:
            raise FetchError(f"Failed to load {self.kind}") from exc
        return [_parse_row(self.kind, row) for row in response.data or []]

    async def get(self, transaction_id: str) -> TransactionView | None:
        """Return a row by id, if present."""
        try:
            response = (
                await self.client.table(self.kind.table)
                .select(self._columns)
                .eq("id", transaction_id)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise FetchError(f"Failed to load {self.kind}") from exc
        if not response.data:
            return None
        return _parse_row(self.kind, response.data[0])

    async def update(
        self, transaction_id: str, values: dict[str, object]
    ) -> TransactionView | None:
        """Apply a partial update and return the updated row."""
        payload = {
            key: str(value) if isinstance(value, Decimal) else value
            for key, value in values.items()
        }
        try:
            response = (
                await self.client.table(self.kind.table)
                .update(payload)
                .eq("id", transaction_id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise WriteError(f"Failed to update {self.kind}") from exc
        if not response.data:
            return None
        return await self._read_back(transaction_id, response.data[0])

    async def delete(self, transaction_id: str) -> None:
        """Delete a row by id."""
        try:
            await (
                self.client.table(self.kind.table)
                .delete()
                .eq("id", transaction_id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise WriteError(f"Failed to delete {self.kind}") from exc

    async def _read_back(
        self, transaction_id: str, written: dict[str, object]
    ) -> TransactionView:
        # The write is already committed at this point.
        try:
            joined = await self.get(transaction_id)
        except FetchError:
            logger.warning(
                "Falling back to the written row",
                extra={"kind": str(self.kind), "transaction_id": transaction_id},
            )
            joined = None
        return joined or _parse_row(self.kind, written)


def _parse_row(kind: TransactionKind, row: dict[str, object]) -> TransactionView:
    owner = row.get("users")
    owner_name = owner.get("name") if isinstance(owner, dict) else None
    return TransactionView(
        id=str(row["id"]),
        kind=kind,
        amount=to_decimal(row.get("amount")),
        owner_id=str(row.get("user_id", "")),
        created_at=_parse_timestamp(row.get("created_at")),
        label=str(row.get(kind.label_field) or ""),
        owner_name=str(owner_name or ""),
    )


def _parse_timestamp(raw: object) -> datetime:
    if isinstance(raw, str) and raw:
        parsed = datetime.fromisoformat(raw)
    else:
        parsed = datetime.now(tz=UTC)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
