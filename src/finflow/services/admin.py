"""Admin service for the user list and recent activity feed."""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass

from finflow.domain.models import UserRecord
from finflow.domain.transactions import TransactionView
from finflow.errors import FetchError
from finflow.services.auth import UserRepository
from finflow.services.transactions import TransactionService

logger = logging.getLogger(__name__)

FEED_LIMIT = 10


@dataclass(frozen=True)
class AdminOverview:
    """Data shown on the admin screen."""

    users: list[UserRecord]
    income_count: int
    expense_count: int
    recent: list[TransactionView]


@dataclass
class AdminService:
    """Service for admin dashboards."""

    user_repository: UserRepository
    income: TransactionService
    expenses: TransactionService

    async def overview(self) -> AdminOverview:
        """Return users, record counts and the most recent transactions."""
        users, income, expenses = await asyncio.gather(
            _or_empty(self.user_repository.list_users(), "users"),
            _or_empty(self.income.list(), "income"),
            _or_empty(self.expenses.list(), "expenses"),
        )
        recent = sorted(
            [*income[:FEED_LIMIT], *expenses[:FEED_LIMIT]],
            key=lambda row: row.created_at,
            reverse=True,
        )[:FEED_LIMIT]
        return AdminOverview(
            users=users,
            income_count=len(income),
            expense_count=len(expenses),
            recent=recent,
        )


async def _or_empty(pending: Awaitable[list], collection: str) -> list:
    try:
        return await pending
    except FetchError:
        logger.warning("Admin fetch failed", extra={"collection": collection})
        return []
