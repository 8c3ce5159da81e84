"""Supabase-backed user repository."""

from dataclasses import dataclass

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient

from finflow.domain.models import Role, UserRecord
from finflow.errors import FetchError, WriteError
from finflow.services.auth import UserRepository

_USER_COLUMNS = "id, name, role, photo, password"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: AsyncClient

    async def get_user(self, user_id: str) -> UserRecord | None:
        """Return the user row for an id, if present."""
        try:
            response = (
                await self.client.table("users")
                .select(_USER_COLUMNS)
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise FetchError("Failed to load user") from exc
        if response.data:
            return _parse_user(response.data[0])
        return None

    async def list_users(self) -> list[UserRecord]:
        """Return all users ordered by id."""
        try:
            response = (
                await self.client.table("users")
                .select(_USER_COLUMNS)
                .order("id", desc=False)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise FetchError("Failed to load users") from exc
        return [_parse_user(row) for row in response.data or []]

    async def update_name(self, user_id: str, name: str) -> None:
        """Update the display name for a user."""
        await self._update(user_id, {"name": name})

    async def update_password(self, user_id: str, password: str) -> None:
        """Replace the stored secret for a user."""
        await self._update(user_id, {"password": password})

    async def _update(self, user_id: str, values: dict[str, object]) -> None:
        try:
            response = (
                await self.client.table("users")
                .update(values)
                .eq("id", user_id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise WriteError("Failed to update user") from exc
        if not response.data:
            raise WriteError(f"User {user_id} not found")


def _parse_user(row: dict[str, object]) -> UserRecord:
    role_raw = row.get("role")
    role = Role.ADMIN if role_raw == Role.ADMIN.value else Role.MEMBER
    photo = row.get("photo")
    return UserRecord(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        role=role,
        photo=str(photo) if photo else None,
        password=str(row.get("password") or ""),
    )
