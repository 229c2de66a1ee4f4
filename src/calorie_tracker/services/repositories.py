"""Persistence interfaces shared by the application services."""

from decimal import Decimal
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.models import (
    FoodEntryDraft,
    FoodEntryRecord,
    Role,
    UserRecord,
)
from calorie_tracker.domain.queries import EntryOrder, EntryQuery


class UserRepository(Protocol):
    """Persistence interface for user accounts."""

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""

    def get_users(self, user_ids: set[UUID]) -> list[UserRecord]:
        """Return the users matching the given ids."""

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user with this email, compared case-insensitively."""

    def get_by_user_name(self, user_name: str) -> UserRecord | None:
        """Return the user with this user name, compared case-insensitively."""

    def get_first_admin(self) -> UserRecord | None:
        """Return any user holding the Admin role."""

    def create_user(
        self,
        email: str,
        user_name: str,
        role: Role,
        calorie_limit: Decimal,
        price_limit: Decimal,
    ) -> UserRecord:
        """Create and return a new user record."""

    def update_limits(
        self, user_id: UUID, calorie_limit: Decimal, price_limit: Decimal
    ) -> UserRecord | None:
        """Update a user's limits and return the new record."""

    def delete_user(self, user_id: UUID) -> int:
        """Delete a user and return the number of rows removed."""

    def list_users(
        self, role: Role, name_filter: str | None, offset: int, limit: int
    ) -> list[UserRecord]:
        """Return users with the role, ordered by user name."""

    def count_users(self, role: Role, name_filter: str | None) -> int:
        """Count users with the role matching the optional name filter."""


class FoodEntryRepository(Protocol):
    """Persistence interface for food entries."""

    def get_entry(self, entry_id: UUID) -> FoodEntryRecord | None:
        """Return an entry by id, if present."""

    def list_entries(self, query: EntryQuery) -> list[FoodEntryRecord]:
        """Return all entries matching the query, oldest date_taken first."""

    def list_entries_page(
        self, query: EntryQuery, offset: int, limit: int, order: EntryOrder
    ) -> list[FoodEntryRecord]:
        """Return one page of entries matching the query."""

    def count_entries(self, query: EntryQuery) -> int:
        """Count entries matching the query."""

    def create_entry(self, draft: FoodEntryDraft) -> FoodEntryRecord:
        """Insert an entry and return it."""

    def update_entry(
        self, entry_id: UUID, draft: FoodEntryDraft
    ) -> FoodEntryRecord | None:
        """Replace an entry's values and return it."""

    def delete_entry(self, entry_id: UUID) -> int:
        """Delete an entry and return the number of rows removed."""

    def delete_entries_by_user(self, user_id: UUID) -> int:
        """Delete every entry owned by a user and return how many were removed."""
