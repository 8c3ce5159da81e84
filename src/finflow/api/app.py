"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from finflow.api.admin import router as admin_router
from finflow.api.dependencies import require
from finflow.api.schemas import (
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    TransactionCreate,
    TransactionUpdate,
)
from finflow.api.serializers import (
    serialize_dashboard,
    serialize_session,
    serialize_snapshot,
    serialize_transaction,
)
from finflow.app_logging import configure_logging
from finflow.containers import AppContainer
from finflow.domain.analytics import Period
from finflow.domain.models import Identity
from finflow.domain.transactions import (
    ALL,
    OwnedBy,
    TransactionKind,
    TransactionPatch,
    TransactionView,
)
from finflow.errors import (
    AuthError,
    FetchError,
    PermissionDenied,
    ValidationError,
    WriteError,
)
from finflow.services.access import Route, can_edit

GENERIC_FAILURE = "Something went wrong. Please try again."
CONTACT_MESSAGE = "For any features or other queries, contact admins."
UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.state.session = container.session_service.start()

    app.include_router(admin_router)
    _register_error_handlers(app, logger)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/login")
    async def login(payload: LoginRequest, request: Request) -> dict[str, object]:
        """Authenticate and establish the process session."""
        session = await container.session_service.login(payload.id, payload.password)
        request.app.state.session = session
        return serialize_session(session.identity)

    @app.post("/logout")
    async def logout(request: Request) -> dict[str, str]:
        """Tear down the process session."""
        container.session_service.logout()
        request.app.state.session = None
        return {"status": "ok"}

    @app.get("/session")
    async def current_session(request: Request) -> dict[str, object]:
        """Report whether a session is active."""
        session = request.app.state.session
        if session is None:
            return {"authenticated": False}
        return serialize_session(session.identity)

    @app.get("/dashboard")
    async def dashboard(
        identity: Identity = Depends(require(Route.DASHBOARD)),
    ) -> dict[str, object]:
        """Return the three summary cards."""
        summary = await container.analytics_service.dashboard()
        return serialize_dashboard(
            summary, identity, container.settings.organization_name
        )

    @app.post("/transactions/{kind}", status_code=status.HTTP_201_CREATED)
    async def create_transaction(
        kind: TransactionKind,
        payload: TransactionCreate,
        identity: Identity = Depends(require(Route.ADD_TRANSACTION)),
    ) -> dict[str, object]:
        """Record an income or expense for the current identity."""
        created = await container.transactions(kind).create(
            identity.id, payload.amount, payload.label
        )
        return serialize_transaction(created, identity)

    @app.get("/transactions/{kind}")
    async def list_transactions(
        kind: TransactionKind,
        identity: Identity = Depends(require(Route.MANAGE_TRANSACTIONS)),
    ) -> dict[str, object]:
        """List all records for admins, own records for members."""
        scope = ALL if identity.is_admin else OwnedBy(identity.id)
        try:
            rows = await container.transactions(kind).list(scope)
        except FetchError:
            logger.warning("Failed to fetch transactions", extra={"kind": str(kind)})
            rows = []
        return {
            "kind": str(kind),
            "count": len(rows),
            "transactions": [serialize_transaction(row, identity) for row in rows],
        }

    @app.patch("/transactions/{kind}/{transaction_id}")
    async def update_transaction(
        kind: TransactionKind,
        transaction_id: str,
        payload: TransactionUpdate,
        identity: Identity = Depends(require(Route.MANAGE_TRANSACTIONS)),
    ) -> dict[str, object]:
        """Edit a record the identity owns, or any record for admins."""
        service = container.transactions(kind)
        await _load_editable(service.get, transaction_id, identity)
        updated = await service.update(
            transaction_id,
            TransactionPatch(amount=payload.amount, label=payload.label),
        )
        return serialize_transaction(updated, identity)

    @app.delete("/transactions/{kind}/{transaction_id}")
    async def delete_transaction(
        kind: TransactionKind,
        transaction_id: str,
        identity: Identity = Depends(require(Route.MANAGE_TRANSACTIONS)),
    ) -> dict[str, str]:
        """Delete a record the identity owns, or any record for admins."""
        service = container.transactions(kind)
        await _load_editable(service.get, transaction_id, identity)
        await service.delete(transaction_id)
        return {"status": "deleted", "id": transaction_id}

    @app.get("/analytics")
    async def analytics(
        period: Period = Period.MONTH,
        details: bool = False,
        identity: Identity = Depends(require(Route.ANALYTICS)),
    ) -> dict[str, object]:
        """Return charts and totals for the selected period."""
        snapshot = await container.analytics_panel.select(period, container.clock())
        if snapshot is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Superseded by a newer analytics request",
            )
        return serialize_snapshot(snapshot, identity, details=details)

    @app.patch("/profile")
    async def update_profile(
        payload: ProfileUpdate,
        request: Request,
        identity: Identity = Depends(require(Route.PROFILE)),
    ) -> dict[str, object]:
        """Change the display name and refresh the stored session."""
        updated = await container.authenticator.update_name(identity, payload.name)
        request.app.state.session = container.session_service.refresh(
            request.app.state.session, updated
        )
        return serialize_session(updated)

    @app.post("/profile/password")
    async def change_password(
        payload: PasswordChange,
        identity: Identity = Depends(require(Route.PROFILE)),
    ) -> dict[str, str]:
        """Change the current identity's password."""
        await container.authenticator.change_password(
            identity,
            current=payload.current_password,
            new=payload.new_password,
            confirmation=payload.confirm_password,
        )
        return {"status": "ok"}

    @app.get("/contact", dependencies=[Depends(require(Route.CONTACT))])
    async def contact() -> dict[str, str]:
        """Static contact information."""
        return {
            "title": "Need Help?",
            "message": CONTACT_MESSAGE,
            "organization": container.settings.organization_name,
        }

    return app


def _register_error_handlers(app: FastAPI, logger: logging.Logger) -> None:
    async def validation_error(_: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=UNPROCESSABLE, content={"detail": str(exc)})

    async def auth_error(_: Request, exc: Exception) -> JSONResponse:
        code = (
            status.HTTP_403_FORBIDDEN
            if isinstance(exc, PermissionDenied)
            else status.HTTP_401_UNAUTHORIZED
        )
        return JSONResponse(status_code=code, content={"detail": str(exc)})

    async def backend_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Backend request failed", exc_info=exc, extra={"path": request.url.path}
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": GENERIC_FAILURE},
        )

    app.add_exception_handler(ValidationError, validation_error)
    app.add_exception_handler(AuthError, auth_error)
    app.add_exception_handler(WriteError, backend_error)
    app.add_exception_handler(FetchError, backend_error)


async def _load_editable(
    loader: Callable[[str], Awaitable[TransactionView | None]],
    transaction_id: str,
    identity: Identity,
) -> TransactionView:
    existing = await loader(transaction_id)
    if existing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    if not can_edit(identity, existing):
        raise PermissionDenied("You can only change your own transactions")
    return existing
