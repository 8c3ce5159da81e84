"""Authorization predicates and route guards."""

from dataclasses import dataclass
from enum import StrEnum

from finflow.domain.models import Identity, Role
from finflow.domain.sessions import Session
from finflow.domain.transactions import Transaction, TransactionView
from finflow.errors import AuthenticationRequired, PermissionDenied


class Route(StrEnum):
    """Pages of the application."""

    LOGIN = "/login"
    DASHBOARD = "/dashboard"
    PROFILE = "/profile"
    ANALYTICS = "/analytics"
    CONTACT = "/contact"
    ADD_TRANSACTION = "/add-transaction"
    MANAGE_TRANSACTIONS = "/manage-transactions"
    ADMIN = "/admin"


ADMIN_ROUTES = frozenset({Route.ADMIN})


@dataclass(frozen=True)
class MenuItem:
    """Navigation entry."""

    label: str
    route: Route


_MEMBER_MENU = (
    MenuItem("Dashboard", Route.DASHBOARD),
    MenuItem("Profile", Route.PROFILE),
    MenuItem("Analytics", Route.ANALYTICS),
    MenuItem("Contact", Route.CONTACT),
    MenuItem("Add Income/Expenses", Route.ADD_TRANSACTION),
    MenuItem("Manage Transactions", Route.MANAGE_TRANSACTIONS),
)


def can_edit(identity: Identity, transaction: Transaction | TransactionView) -> bool:
    """Owner-or-admin rule for edit and delete."""
    return identity.role is Role.ADMIN or identity.id == transaction.owner_id


def can_view_admin_panel(identity: Identity) -> bool:
    return identity.role is Role.ADMIN


def requires_auth(route: Route) -> bool:
    return route is not Route.LOGIN


def guard(route: Route, session: Session | None) -> Identity:
    """Return the identity allowed past a protected ``route``.

    Raises AuthenticationRequired without a session and PermissionDenied when
    a member requests an admin route.
    """
    if not requires_auth(route):
        raise ValueError(f"{route} is public and has no guard")
    if session is None:
        raise AuthenticationRequired
    if route in ADMIN_ROUTES and not can_view_admin_panel(session.identity):
        raise PermissionDenied("Admin access required")
    return session.identity


def menu_items(identity: Identity) -> list[MenuItem]:
    """Navigation entries visible to ``identity``."""
    items = list(_MEMBER_MENU)
    if can_view_admin_panel(identity):
        items.append(MenuItem("Admin Panel", Route.ADMIN))
    return items
