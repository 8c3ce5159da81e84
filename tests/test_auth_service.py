"""Tests for credential verification and password management."""

import asyncio

import pytest

from finflow.domain.models import Role
from finflow.errors import InvalidCredentials, ValidationError
from finflow.services.auth import Authenticator, hash_secret, verify_secret
from tests.conftest import InMemoryUserRepository


def test_authenticate_returns_identity(
    user_repository: InMemoryUserRepository,
) -> None:
    authenticator = Authenticator(user_repository)

    identity = asyncio.run(authenticator.authenticate("root", "root-secret"))

    assert identity.id == "root"
    assert identity.name == "Root"
    assert identity.role is Role.ADMIN


def test_authenticate_defaults_empty_name(
    user_repository: InMemoryUserRepository,
) -> None:
    user_repository.add("42", hash_secret("pass123", rounds=4))
    authenticator = Authenticator(user_repository)

    identity = asyncio.run(authenticator.authenticate("42", "pass123"))

    assert identity.name == "User 42"
    assert identity.role is Role.MEMBER


def test_authenticate_accepts_legacy_plaintext_secret(
    user_repository: InMemoryUserRepository,
) -> None:
    authenticator = Authenticator(user_repository)

    identity = asyncio.run(authenticator.authenticate("bob", "bob-secret"))

    assert identity.name == "Bob"


@pytest.mark.parametrize(
    ("identifier", "secret"),
    [
        ("alice", "wrong"),
        ("nobody", "alice-secret"),
        ("alice", ""),
        (" alice", "alice-secret"),
        ("alice ", "alice-secret"),
    ],
)
def test_authenticate_rejects_bad_credentials(
    user_repository: InMemoryUserRepository, identifier: str, secret: str
) -> None:
    authenticator = Authenticator(user_repository)

    with pytest.raises(InvalidCredentials) as exc_info:
        asyncio.run(authenticator.authenticate(identifier, secret))

    assert str(exc_info.value) == "Invalid credentials"


def test_authenticate_collapses_lookup_failure(
    user_repository: InMemoryUserRepository,
) -> None:
    user_repository.fail_reads = True
    authenticator = Authenticator(user_repository)

    with pytest.raises(InvalidCredentials):
        asyncio.run(authenticator.authenticate("alice", "alice-secret"))


def test_hash_secret_is_salted_and_verifiable() -> None:
    first = hash_secret("hunter22", rounds=4)
    second = hash_secret("hunter22", rounds=4)

    assert first != second
    assert first.startswith("$2b$")
    assert verify_secret(first, "hunter22")
    assert not verify_secret(first, "hunter23")
    assert not verify_secret("", "")
    assert not verify_secret(first, "x" * 73)


def test_verify_secret_handles_legacy_and_malformed_rows() -> None:
    assert verify_secret("plain-secret", "plain-secret")
    assert not verify_secret("plain-secret", "plain-secreT")
    assert not verify_secret("$2b$12$truncated", "anything")


def test_change_password_stores_hash(
    user_repository: InMemoryUserRepository,
) -> None:
    authenticator = Authenticator(user_repository)
    identity = asyncio.run(authenticator.authenticate("bob", "bob-secret"))

    asyncio.run(
        authenticator.change_password(
            identity, "bob-secret", "new-secret", "new-secret"
        )
    )

    stored = user_repository.users["bob"].password
    assert stored.startswith("$2b$")
    assert asyncio.run(authenticator.authenticate("bob", "new-secret")).id == "bob"


@pytest.mark.parametrize(
    ("current", "new", "confirmation", "message"),
    [
        ("alice-secret", "abcdef", "abcdeg", "do not match"),
        ("alice-secret", "abc", "abc", "at least 6"),
        ("wrong", "abcdef", "abcdef", "incorrect"),
        ("alice-secret", "a" * 73, "a" * 73, "at most 72"),
    ],
)
def test_change_password_validation(
    user_repository: InMemoryUserRepository,
    current: str,
    new: str,
    confirmation: str,
    message: str,
) -> None:
    authenticator = Authenticator(user_repository)
    identity = user_repository.users["alice"].to_identity()

    with pytest.raises(ValidationError, match=message):
        asyncio.run(authenticator.change_password(identity, current, new, confirmation))


def test_update_name_trims_and_rejects_blank(
    user_repository: InMemoryUserRepository,
) -> None:
    authenticator = Authenticator(user_repository)
    identity = user_repository.users["alice"].to_identity()

    updated = asyncio.run(authenticator.update_name(identity, "  Alice K  "))

    assert updated.name == "Alice K"
    assert user_repository.users["alice"].name == "Alice K"
    with pytest.raises(ValidationError):
        asyncio.run(authenticator.update_name(identity, "   "))
