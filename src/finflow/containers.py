"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime

from supabase import AsyncClient

from finflow.adapters.json_file_storage import JsonFileStorage
from finflow.adapters.supabase_transaction_repository import (
    SupabaseTransactionRepository,
)
from finflow.adapters.supabase_user_repository import SupabaseUserRepository
from finflow.config import Settings
from finflow.domain.transactions import TransactionKind
from finflow.services.admin import AdminService
from finflow.services.analytics import AnalyticsPanel, AnalyticsService
from finflow.services.auth import Authenticator
from finflow.services.sessions import SessionService, SessionStore
from finflow.services.transactions import TransactionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    authenticator: Authenticator
    session_service: SessionService
    income_service: TransactionService
    expense_service: TransactionService
    analytics_service: AnalyticsService
    analytics_panel: AnalyticsPanel
    admin_service: AdminService
    clock: Callable[[], datetime]
    close_resources: Callable[[], Awaitable[None]]

    def transactions(self, kind: TransactionKind) -> TransactionService:
        """Return the service for one transaction kind."""
        if kind is TransactionKind.INCOME:
            return self.income_service
        return self.expense_service


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = AsyncClient(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    income_service = TransactionService(
        SupabaseTransactionRepository(supabase_client, TransactionKind.INCOME)
    )
    expense_service = TransactionService(
        SupabaseTransactionRepository(supabase_client, TransactionKind.EXPENSE)
    )
    authenticator = Authenticator(user_repository)
    session_service = SessionService(
        store=SessionStore(JsonFileStorage(resolved_settings.session_path)),
        authenticator=authenticator,
    )
    analytics_service = AnalyticsService(
        income=income_service, expenses=expense_service
    )
    admin_service = AdminService(
        user_repository=user_repository,
        income=income_service,
        expenses=expense_service,
    )
    local_zone = resolved_settings.tzinfo

    def clock() -> datetime:
        return datetime.now(tz=local_zone)

    async def close_resources() -> None:
        await supabase_client.postgrest.aclose()

    return AppContainer(
        settings=resolved_settings,
        authenticator=authenticator,
        session_service=session_service,
        income_service=income_service,
        expense_service=expense_service,
        analytics_service=analytics_service,
        analytics_panel=AnalyticsPanel(analytics_service),
        admin_service=admin_service,
        clock=clock,
        close_resources=close_resources,
    )
