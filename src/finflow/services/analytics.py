"""Period aggregation of transactions for charts and summary cards."""

import asyncio
import calendar
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Protocol, TypeVar

from finflow.domain.analytics import (
    AnalyticsSnapshot,
    Bucket,
    DashboardSummary,
    Period,
    PeriodTotals,
)
from finflow.domain.transactions import TransactionKind, TransactionView
from finflow.errors import FetchError
from finflow.services.transactions import TransactionService

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24
WEEK_DAYS = 7
MONTH_SPANS = 4
RECENT_LIMIT = 5
NO_DATA_LABEL = "No Data"
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class Dated(Protocol):
    """Anything the aggregator can bucket."""

    kind: TransactionKind
    amount: Decimal
    created_at: datetime


T = TypeVar("T", bound=Dated)


def window_start(period: Period, now: datetime) -> datetime:
    """Return the inclusive lower bound of the filter window."""
    if period is Period.DAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period is Period.WEEK:
        return now - timedelta(days=WEEK_DAYS)
    year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def filter_window(
    transactions: Iterable[T], period: Period, now: datetime
) -> list[T]:
    """Keep transactions created within ``[window_start, now]``."""
    start = window_start(period, now)
    return [item for item in transactions if start <= item.created_at <= now]


def totals(
    transactions: Iterable[Dated], period: Period, now: datetime
) -> PeriodTotals:
    """Sum income and expense over the whole filtered window."""
    income_total = Decimal("0")
    expense_total = Decimal("0")
    income_count = 0
    expense_count = 0
    for item in filter_window(transactions, period, now):
        if item.kind is TransactionKind.INCOME:
            income_total += item.amount
            income_count += 1
        else:
            expense_total += item.amount
            expense_count += 1
    return PeriodTotals(
        income_total=income_total,
        expense_total=expense_total,
        income_count=income_count,
        expense_count=expense_count,
    )


def bucket(
    transactions: Iterable[Dated], period: Period, now: datetime
) -> list[Bucket]:
    """Group the filtered window into ordered chart buckets."""
    filtered = filter_window(transactions, period, now)
    local = [(item, item.created_at.astimezone(now.tzinfo)) for item in filtered]
    if period is Period.DAY:
        return _hourly(local)
    if period is Period.WEEK:
        return _daily(local, now)
    return _weekly(local, now)


def _hourly(local: Sequence[tuple[Dated, datetime]]) -> list[Bucket]:
    buckets = [
        _sum_bucket(f"{hour:02d}:00", [item for item, at in local if at.hour == hour])
        for hour in range(HOURS_PER_DAY)
    ]
    active = [entry for entry in buckets if not entry.is_empty]
    return active or [Bucket(label=NO_DATA_LABEL)]


def _daily(local: Sequence[tuple[Dated, datetime]], now: datetime) -> list[Bucket]:
    buckets = []
    for offset in range(WEEK_DAYS - 1, -1, -1):
        day = (now - timedelta(days=offset)).date()
        members = [item for item, at in local if at.date() == day]
        buckets.append(_sum_bucket(WEEKDAY_NAMES[day.weekday()], members))
    return buckets


def _weekly(local: Sequence[tuple[Dated, datetime]], now: datetime) -> list[Bucket]:
    spans = []
    for index in range(1, MONTH_SPANS + 1):
        end = now - timedelta(days=(MONTH_SPANS - index) * WEEK_DAYS)
        spans.append((end - timedelta(days=WEEK_DAYS), end))
    members: list[list[Dated]] = [[] for _ in spans]
    for item, at in local:
        # Spans share their boundary instants; the earliest matching span wins.
        for position, (start, end) in enumerate(spans):
            if start <= at <= end:
                members[position].append(item)
                break
    return [
        _sum_bucket(f"Week {index}", group)
        for index, group in enumerate(members, start=1)
    ]


def _sum_bucket(label: str, items: Iterable[Dated]) -> Bucket:
    income_sum = Decimal("0")
    expense_sum = Decimal("0")
    for item in items:
        if item.kind is TransactionKind.INCOME:
            income_sum += item.amount
        else:
            expense_sum += item.amount
    return Bucket(label=label, income_sum=income_sum, expense_sum=expense_sum)


@dataclass
class AnalyticsService:
    """Fetches both collections and computes dashboards and period analytics."""

    income: TransactionService
    expenses: TransactionService

    async def fetch_all(self) -> tuple[list[TransactionView], list[TransactionView]]:
        """Fetch income and expenses concurrently; failed reads become empty."""
        income, expenses = await asyncio.gather(
            self._fetch(self.income), self._fetch(self.expenses)
        )
        return income, expenses

    async def dashboard(self) -> DashboardSummary:
        """Return all-time totals for the summary cards."""
        income, expenses = await self.fetch_all()
        return DashboardSummary(
            total_income=sum((row.amount for row in income), Decimal("0")),
            total_expenses=sum((row.amount for row in expenses), Decimal("0")),
        )

    async def snapshot(self, period: Period, now: datetime) -> AnalyticsSnapshot:
        """Return buckets, totals and recent records for a period."""
        income, expenses = await self.fetch_all()
        combined = [*income, *expenses]
        return AnalyticsSnapshot(
            period=period,
            buckets=bucket(combined, period, now),
            totals=totals(combined, period, now),
            recent_income=filter_window(income, period, now)[:RECENT_LIMIT],
            recent_expenses=filter_window(expenses, period, now)[:RECENT_LIMIT],
        )

    @staticmethod
    async def _fetch(service: TransactionService) -> list[TransactionView]:
        try:
            return await service.list()
        except FetchError:
            logger.warning(
                "Falling back to empty transactions", extra={"kind": str(service.kind)}
            )
            return []


@dataclass
class AnalyticsPanel:
    """Holds the selected period and drops responses for deselected periods."""

    service: AnalyticsService
    period: Period = Period.MONTH
    snapshot: AnalyticsSnapshot | None = None
    _generation: int = field(default=0, repr=False)
    _applied: int = field(default=0, repr=False)

    async def select(self, period: Period, now: datetime) -> AnalyticsSnapshot | None:
        """Switch period and load it.

        Returns None when another period was selected while loading. Overlapping
        loads of the selected period all succeed; the most recently requested
        one stays on the panel.
        """
        self._generation += 1
        generation = self._generation
        self.period = period
        snapshot = await self.service.snapshot(period, now)
        if period is not self.period:
            logger.info(
                "Discarding stale analytics response", extra={"period": str(period)}
            )
            return None
        if generation > self._applied:
            self.snapshot = snapshot
            self._applied = generation
        return snapshot
