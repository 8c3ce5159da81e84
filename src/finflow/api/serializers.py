"""JSON shaping for API responses."""

from decimal import Decimal

from finflow.domain.analytics import AnalyticsSnapshot, Bucket, DashboardSummary
from finflow.domain.models import Identity, UserRecord
from finflow.domain.money import format_inr
from finflow.domain.transactions import TransactionView
from finflow.services.access import can_edit, menu_items


def money(amount: Decimal) -> dict[str, str]:
    """Exact amount plus its INR display string."""
    return {"amount": str(amount), "display": format_inr(amount)}


def serialize_session(identity: Identity) -> dict[str, object]:
    return {
        "authenticated": True,
        "user": {
            "id": identity.id,
            "name": identity.name,
            "role": str(identity.role),
            "photo": identity.photo,
        },
        "menu": [
            {"label": item.label, "path": str(item.route)}
            for item in menu_items(identity)
        ],
    }


def serialize_user(user: UserRecord) -> dict[str, object]:
    identity = user.to_identity()
    return {
        "id": identity.id,
        "name": identity.name,
        "role": str(identity.role),
        "photo": identity.photo,
    }


def serialize_transaction(
    row: TransactionView, identity: Identity
) -> dict[str, object]:
    return {
        "id": row.id,
        "kind": str(row.kind),
        "label": row.label,
        "owner_id": row.owner_id,
        "owner_name": row.owner_name,
        "created_at": row.created_at.isoformat(),
        "can_edit": can_edit(identity, row),
        **money(row.amount),
    }


def serialize_dashboard(
    summary: DashboardSummary, identity: Identity, organization: str
) -> dict[str, object]:
    return {
        "welcome": f"Welcome back, {identity.name}!",
        "organization": organization,
        "total_income": money(summary.total_income),
        "total_expenses": money(summary.total_expenses),
        "balance": money(summary.balance),
        "status": summary.status,
        "role": str(identity.role),
    }


def serialize_bucket(entry: Bucket) -> dict[str, str]:
    return {
        "label": entry.label,
        "income": str(entry.income_sum),
        "expenses": str(entry.expense_sum),
    }


def serialize_snapshot(
    snapshot: AnalyticsSnapshot, identity: Identity, *, details: bool
) -> dict[str, object]:
    """Charts and totals, with the recent-records lists when ``details``."""
    payload: dict[str, object] = {
        "period": str(snapshot.period),
        "buckets": [serialize_bucket(entry) for entry in snapshot.buckets],
        "totals": {
            "income": money(snapshot.totals.income_total),
            "expenses": money(snapshot.totals.expense_total),
            "balance": money(snapshot.totals.balance),
            "income_count": snapshot.totals.income_count,
            "expense_count": snapshot.totals.expense_count,
        },
    }
    if details:
        payload["recent_income"] = [
            serialize_transaction(row, identity) for row in snapshot.recent_income
        ]
        payload["recent_expenses"] = [
            serialize_transaction(row, identity) for row in snapshot.recent_expenses
        ]
    return payload
