"""Domain models for income and expense transactions."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import ClassVar


class TransactionKind(StrEnum):
    """Discriminator for the two transaction variants."""

    INCOME = "income"
    EXPENSE = "expense"

    @property
    def table(self) -> str:
        """Remote table holding this kind."""
        return "income" if self is TransactionKind.INCOME else "expenses"

    @property
    def label_field(self) -> str:
        """Column holding the kind-specific label."""
        return "name" if self is TransactionKind.INCOME else "reason"


@dataclass(frozen=True)
class Income:
    """Money received by the organization."""

    kind: ClassVar[TransactionKind] = TransactionKind.INCOME

    id: str
    amount: Decimal
    owner_id: str
    created_at: datetime
    name: str

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class Expense:
    """Money spent by the organization."""

    kind: ClassVar[TransactionKind] = TransactionKind.EXPENSE

    id: str
    amount: Decimal
    owner_id: str
    created_at: datetime
    reason: str

    @property
    def label(self) -> str:
        return self.reason


Transaction = Income | Expense


@dataclass(frozen=True)
class TransactionView:
    """Transaction joined with the owner's display name."""

    id: str
    kind: TransactionKind
    amount: Decimal
    owner_id: str
    created_at: datetime
    label: str
    owner_name: str

    @classmethod
    def from_transaction(
        cls, transaction: Transaction, owner_name: str
    ) -> "TransactionView":
        """Flatten a transaction variant with its owner's name."""
        return cls(
            id=transaction.id,
            kind=transaction.kind,
            amount=transaction.amount,
            owner_id=transaction.owner_id,
            created_at=transaction.created_at,
            label=transaction.label,
            owner_name=owner_name,
        )

    def to_transaction(self) -> Transaction:
        """Return the tagged variant for this row."""
        if self.kind is TransactionKind.INCOME:
            return Income(
                id=self.id,
                amount=self.amount,
                owner_id=self.owner_id,
                created_at=self.created_at,
                name=self.label,
            )
        return Expense(
            id=self.id,
            amount=self.amount,
            owner_id=self.owner_id,
            created_at=self.created_at,
            reason=self.label,
        )


@dataclass(frozen=True)
class OwnedBy:
    """List scope restricted to one owner."""

    user_id: str


class AllOwners:
    """List scope covering every owner."""

    def __repr__(self) -> str:
        return "ALL"


ALL = AllOwners()

Scope = AllOwners | OwnedBy


@dataclass(frozen=True)
class TransactionPatch:
    """Partial update for a transaction; ``None`` leaves a field unchanged."""

    amount: Decimal | None = None
    label: str | None = None
