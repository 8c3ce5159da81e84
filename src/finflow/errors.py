"""Application error hierarchy."""


class FinFlowError(Exception):
    """Base class for application errors."""


class ValidationError(FinFlowError):
    """Input rejected before any backend call."""


class AuthError(FinFlowError):
    """Authentication or authorization failure."""


class InvalidCredentials(AuthError):
    """Identifier/secret pair did not match a user."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class AuthenticationRequired(AuthError):
    """A protected route was requested without a session."""

    def __init__(self) -> None:
        super().__init__("Login required")


class PermissionDenied(AuthError):
    """The current identity may not perform the action."""


class WriteError(FinFlowError):
    """Backend rejected a write or was unreachable."""


class FetchError(FinFlowError):
    """Backend read failed."""
