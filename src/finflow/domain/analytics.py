"""Domain models for period analytics."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum

from finflow.domain.transactions import TransactionView


class Period(StrEnum):
    """Aggregation window selected by the user."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class Bucket:
    """Summed income and expense for one time slice."""

    label: str
    income_sum: Decimal = Decimal("0")
    expense_sum: Decimal = Decimal("0")

    @property
    def is_empty(self) -> bool:
        return self.income_sum == 0 and self.expense_sum == 0


@dataclass(frozen=True)
class PeriodTotals:
    """Totals over every transaction inside a period window."""

    income_total: Decimal = Decimal("0")
    expense_total: Decimal = Decimal("0")
    income_count: int = 0
    expense_count: int = 0

    @property
    def balance(self) -> Decimal:
        return self.income_total - self.expense_total


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Everything the analytics screen renders for one period."""

    period: Period
    buckets: list[Bucket]
    totals: PeriodTotals
    recent_income: list[TransactionView] = field(default_factory=list)
    recent_expenses: list[TransactionView] = field(default_factory=list)


@dataclass(frozen=True)
class DashboardSummary:
    """All-time summary cards."""

    total_income: Decimal
    total_expenses: Decimal

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expenses

    @property
    def status(self) -> str:
        if self.balance > 0:
            return "Positive"
        if self.balance < 0:
            return "Deficit"
        return "Balanced"
