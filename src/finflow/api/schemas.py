"""Pydantic models for API request payloads."""

from decimal import Decimal

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Login form payload."""

    id: str
    password: str


class TransactionCreate(BaseModel):
    """Add-transaction form payload; ``label`` is the income name or expense reason."""

    amount: Decimal
    label: str


class TransactionUpdate(BaseModel):
    """Edit dialog payload."""

    amount: Decimal | None = None
    label: str | None = None


class ProfileUpdate(BaseModel):
    """Profile name form payload."""

    name: str


class PasswordChange(BaseModel):
    """Password change form payload."""

    current_password: str
    new_password: str
    confirm_password: str
