"""Admin API endpoints guarded by the admin role."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from finflow.api.dependencies import require
from finflow.api.serializers import serialize_transaction, serialize_user
from finflow.domain.models import Identity  # noqa: TC001
from finflow.services.access import Route

if TYPE_CHECKING:
    from finflow.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("")
async def admin_overview(
    request: Request, identity: Identity = Depends(require(Route.ADMIN))
) -> dict[str, object]:
    """Return users, record counts and the recent-transactions feed."""
    container: AppContainer = request.app.state.container
    overview = await container.admin_service.overview()
    return {
        "user_count": len(overview.users),
        "income_count": overview.income_count,
        "expense_count": overview.expense_count,
        "users": [serialize_user(user) for user in overview.users],
        "recent_transactions": [
            serialize_transaction(row, identity) for row in overview.recent
        ],
    }
