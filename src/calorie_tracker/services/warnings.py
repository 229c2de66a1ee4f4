"""Listings of periods where a user reached a limit."""

from dataclasses import dataclass
from datetime import datetime, tzinfo
from uuid import UUID

from calorie_tracker.domain.aggregation import (
    Bucket,
    Page,
    aggregate,
    exceeding,
    paginate,
    validate_page,
)
from calorie_tracker.domain.models import Principal, UserRecord
from calorie_tracker.domain.periods import Granularity, bucket_of
from calorie_tracker.domain.queries import build_entry_query, period_query
from calorie_tracker.errors import NotFound
from calorie_tracker.services.access import authorize, enforce
from calorie_tracker.services.repositories import FoodEntryRepository, UserRepository


@dataclass(frozen=True)
class WarningListing:
    """Exceeded periods for one user, most recent first."""

    user: UserRecord
    granularity: Granularity
    page: Page[Bucket]


@dataclass
class WarningService:
    """Service listing days over the calorie limit and months over the price limit."""

    repository: FoodEntryRepository
    user_repository: UserRepository

    def calorie_warnings(  # noqa: PLR0913
        self,
        actor: Principal,
        user_id: UUID,
        timezone: str | tzinfo | None = None,
        on: datetime | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> WarningListing:
        """Return days whose calories reached the user's limit."""
        return self._list(actor, user_id, Granularity.DAY, timezone, on, page, limit)

    def price_warnings(  # noqa: PLR0913
        self,
        actor: Principal,
        user_id: UUID,
        timezone: str | tzinfo | None = None,
        on: datetime | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> WarningListing:
        """Return months whose spending reached the user's limit."""
        return self._list(actor, user_id, Granularity.MONTH, timezone, on, page, limit)

    def _list(  # noqa: PLR0913
        self,
        actor: Principal,
        user_id: UUID,
        granularity: Granularity,
        timezone: str | tzinfo | None,
        on: datetime | None,
        page: int,
        limit: int,
    ) -> WarningListing:
        validate_page(page, limit)
        enforce(authorize(actor, user_id))
        user = self.user_repository.get_user(user_id)
        if user is None:
            raise NotFound("No user For Specific Id Exists")

        if on is None:
            query = build_entry_query(user_id)
        else:
            query = period_query(user_id, bucket_of(on, timezone, granularity))
        entries = self.repository.list_entries(query)
        if granularity is Granularity.DAY:
            records = ((entry.date_taken, entry.calories) for entry in entries)
            threshold = user.calorie_limit
        else:
            records = ((entry.date_taken, entry.price) for entry in entries)
            threshold = user.price_limit

        exceeded = exceeding(aggregate(records, granularity, timezone), threshold)
        return WarningListing(
            user=user, granularity=granularity, page=paginate(exceeded, page, limit)
        )
