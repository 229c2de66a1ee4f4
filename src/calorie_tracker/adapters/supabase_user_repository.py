"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from supabase import Client

from calorie_tracker.adapters.supabase_rows import escape_like, parse_timestamp
from calorie_tracker.domain.models import Role, UserRecord, to_decimal
from calorie_tracker.services.repositories import UserRepository

_COLUMNS = (
    "id, email, user_name, role, calorie_limit, price_limit, created_at, updated_at"
)


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        return _parse_row(response.data[0]) if response.data else None

    def get_users(self, user_ids: set[UUID]) -> list[UserRecord]:
        """Return the users matching the given ids."""
        if not user_ids:
            return []
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .in_("id", [str(user_id) for user_id in user_ids])
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user with this email, ignoring case."""
        return self._get_by_ilike("email", email)

    def get_by_user_name(self, user_name: str) -> UserRecord | None:
        """Return the user with this user name, ignoring case."""
        return self._get_by_ilike("user_name", user_name)

    def get_first_admin(self) -> UserRecord | None:
        """Return the oldest admin account."""
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .eq("role", Role.ADMIN.value)
            .order("created_at", desc=False)
            .limit(1)
            .execute()
        )
        return _parse_row(response.data[0]) if response.data else None

    def create_user(
        self,
        email: str,
        user_name: str,
        role: Role,
        calorie_limit: Decimal,
        price_limit: Decimal,
    ) -> UserRecord:
        """Create a new user row and return it."""
        response = (
            self.client.table("users")
            .insert(
                {
                    "email": email,
                    "user_name": user_name,
                    "role": role.value,
                    "calorie_limit": str(calorie_limit),
                    "price_limit": str(price_limit),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_row(response.data[0])

    def update_limits(
        self, user_id: UUID, calorie_limit: Decimal, price_limit: Decimal
    ) -> UserRecord | None:
        """Update a user's limits and return the updated row."""
        response = (
            self.client.table("users")
            .update(
                {
                    "calorie_limit": str(calorie_limit),
                    "price_limit": str(price_limit),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", str(user_id))
            .execute()
        )
        return _parse_row(response.data[0]) if response.data else None

    def delete_user(self, user_id: UUID) -> int:
        """Delete a user row and return how many rows were removed."""
        response = self.client.table("users").delete().eq("id", str(user_id)).execute()
        return len(response.data or [])

    def list_users(
        self, role: Role, name_filter: str | None, offset: int, limit: int
    ) -> list[UserRecord]:
        """Return one page of users ordered by user name."""
        request = self.client.table("users").select(_COLUMNS).eq("role", role.value)
        if name_filter:
            request = request.ilike("user_name", f"%{escape_like(name_filter)}%")
        response = (
            request.order("user_name", desc=False)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def count_users(self, role: Role, name_filter: str | None) -> int:
        """Count users with the role matching the optional name filter."""
        request = (
            self.client.table("users")
            .select("id", count="exact")
            .eq("role", role.value)
        )
        if name_filter:
            request = request.ilike("user_name", f"%{escape_like(name_filter)}%")
        response = request.execute()
        return response.count or 0

    def _get_by_ilike(self, column: str, value: str) -> UserRecord | None:
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .ilike(column, escape_like(value))
            .limit(1)
            .execute()
        )
        return _parse_row(response.data[0]) if response.data else None


def _parse_row(row: dict[str, object]) -> UserRecord:
    calorie_limit = row.get("calorie_limit")
    price_limit = row.get("price_limit")
    return UserRecord(
        id=UUID(str(row["id"])),
        email=str(row.get("email", "")),
        user_name=str(row.get("user_name", "")),
        role=Role(row.get("role", Role.USER.value)),
        calorie_limit=None if calorie_limit is None else to_decimal(calorie_limit),
        price_limit=None if price_limit is None else to_decimal(price_limit),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
