"""Food entry writes, listings and post-write limit warnings."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime, tzinfo
from decimal import Decimal
from uuid import UUID

from calorie_tracker.domain.aggregation import (
    Bucket,
    Page,
    aggregate,
    exceeding,
    page_offset,
    paginate,
    totals_by_key,
    validate_page,
)
from calorie_tracker.domain.models import (
    FoodEntryDraft,
    FoodEntryInput,
    FoodEntryRecord,
    Principal,
    Role,
    UserRecord,
    round_amount,
)
from calorie_tracker.domain.periods import Granularity, as_utc, bucket_of
from calorie_tracker.domain.queries import EntryOrder, build_entry_query, period_query
from calorie_tracker.domain.warnings import ThresholdWarnings, format_warnings
from calorie_tracker.errors import InternalError, NotFound, ValidationError
from calorie_tracker.services.access import authorize, enforce, require_role
from calorie_tracker.services.repositories import FoodEntryRepository, UserRepository

_logger = logging.getLogger(__name__)

ENTRY_NOT_FOUND = "No Food Entry For Specific Id Exists"


@dataclass(frozen=True)
class EntryMutationResult:
    """Persisted entry with the warnings computed after the write."""

    entry: FoodEntryRecord
    warnings: ThresholdWarnings


@dataclass
class FoodEntryService:
    """Service that writes food entries and evaluates user limits."""

    repository: FoodEntryRepository
    user_repository: UserRepository

    def create_entry(
        self,
        actor: Principal,
        payload: FoodEntryInput,
        timezone: str | tzinfo | None = None,
    ) -> EntryMutationResult:
        """Create an entry and report daily calorie or monthly price limits reached."""
        draft = _build_draft(payload.user_id or actor.user_id, payload, timezone)
        enforce(authorize(actor, draft.user_id))
        owner = self._load_owner(draft.user_id)

        entry = self.repository.create_entry(draft)
        _logger.info(
            "Food entry created: entry_id=%s user_id=%s", entry.id, entry.user_id
        )
        return EntryMutationResult(
            entry=entry, warnings=self._warnings_after_write(owner, entry, timezone)
        )

    def update_entry(
        self,
        actor: Principal,
        entry_id: UUID,
        payload: FoodEntryInput,
        timezone: str | tzinfo | None = None,
    ) -> EntryMutationResult:
        """Replace an entry's values and report limits reached for its new date."""
        current = self.repository.get_entry(entry_id)
        if current is None:
            raise NotFound(ENTRY_NOT_FOUND)
        draft = _build_draft(payload.user_id or current.user_id, payload, timezone)
        enforce(authorize(actor, current.user_id))
        enforce(authorize(actor, draft.user_id))
        owner = self._load_owner(draft.user_id)

        entry = self.repository.update_entry(entry_id, draft)
        if entry is None:
            raise NotFound(ENTRY_NOT_FOUND)
        _logger.info(
            "Food entry updated: entry_id=%s user_id=%s", entry.id, entry.user_id
        )
        return EntryMutationResult(
            entry=entry, warnings=self._warnings_after_write(owner, entry, timezone)
        )

    def delete_entry(self, actor: Principal, entry_id: UUID) -> None:
        """Delete an entry owned by the caller, or any entry for admins."""
        current = self.repository.get_entry(entry_id)
        if current is None:
            raise NotFound(ENTRY_NOT_FOUND)
        enforce(authorize(actor, current.user_id))
        if self.repository.delete_entry(entry_id) == 0:
            raise NotFound(ENTRY_NOT_FOUND)
        _logger.info("Food entry deleted: entry_id=%s", entry_id)

    def evaluate_thresholds(
        self,
        owner: UserRecord,
        date_taken: datetime,
        timezone: str | tzinfo | None = None,
    ) -> ThresholdWarnings:
        """Check the day and month of ``date_taken`` against the owner limits."""
        calorie_bucket = self._period_total(
            owner.id, date_taken, timezone, Granularity.DAY, "calories"
        )
        price_bucket = self._period_total(
            owner.id, date_taken, timezone, Granularity.MONTH, "price"
        )
        return format_warnings(
            exceeding([calorie_bucket], owner.calorie_limit),
            exceeding([price_bucket], owner.price_limit),
        )

    def list_entries(  # noqa: PLR0913
        self,
        actor: Principal,
        user_id: UUID | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        page: int = 1,
        limit: int = 10,
        populate_user: bool = False,
    ) -> Page[FoodEntryRecord]:
        """Return raw entries by date taken; admins may list every user."""
        validate_page(page, limit)
        target = _listing_target(actor, user_id)
        enforce(authorize(actor, target))
        query = build_entry_query(target, start, end, end_inclusive=True)
        items = self.repository.list_entries_page(
            query, page_offset(page, limit), limit, EntryOrder.DATE_TAKEN_ASC
        )
        if populate_user:
            items = self._with_user_names(items)
        return Page(
            items=items,
            page=page,
            limit=limit,
            total_count=self.repository.count_entries(query),
        )

    def list_entry_days(  # noqa: PLR0913
        self,
        actor: Principal,
        user_id: UUID | None = None,
        timezone: str | tzinfo | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[Bucket]:
        """Return daily calorie totals, most recent day first."""
        validate_page(page, limit)
        target = _listing_target(actor, user_id)
        enforce(authorize(actor, target))
        entries = self.repository.list_entries(
            build_entry_query(target, start, end, end_inclusive=True)
        )
        days = aggregate(
            ((entry.date_taken, entry.calories) for entry in entries),
            Granularity.DAY,
            timezone,
        )
        return paginate(days, page, limit)

    def list_all_entries(
        self, actor: Principal, page: int = 1, limit: int = 10
    ) -> Page[FoodEntryRecord]:
        """Return every user's entries, newest first, with owner names."""
        enforce(require_role(actor, Role.ADMIN))
        validate_page(page, limit)
        query = build_entry_query()
        items = self.repository.list_entries_page(
            query, page_offset(page, limit), limit, EntryOrder.CREATED_DESC
        )
        return Page(
            items=self._with_user_names(items),
            page=page,
            limit=limit,
            total_count=self.repository.count_entries(query),
        )

    def _period_total(  # noqa: PLR0913
        self,
        user_id: UUID,
        date_taken: datetime,
        timezone: str | tzinfo | None,
        granularity: Granularity,
        field: str,
    ) -> Bucket:
        period = bucket_of(date_taken, timezone, granularity)
        entries = self.repository.list_entries(period_query(user_id, period))
        totals = totals_by_key(
            ((entry.date_taken, getattr(entry, field)) for entry in entries),
            granularity,
            timezone,
        )
        return Bucket(
            key=period.key,
            start=period.start,
            end=period.end,
            total=totals.get(period.key, Decimal(0)),
        )

    def _load_owner(self, user_id: UUID) -> UserRecord:
        owner = self.user_repository.get_user(user_id)
        if owner is None:
            raise NotFound("No user For Specific Id Exists")
        return owner

    def _warnings_after_write(
        self,
        owner: UserRecord,
        entry: FoodEntryRecord,
        timezone: str | tzinfo | None,
    ) -> ThresholdWarnings:
        # The entry is already committed; failures here are not rolled back.
        try:
            return self.evaluate_thresholds(owner, entry.date_taken, timezone)
        except Exception as exc:
            _logger.exception(
                "Limit evaluation failed after write", extra={"entry_id": entry.id}
            )
            raise InternalError("Internal server error") from exc

    def _with_user_names(self, items: list[FoodEntryRecord]) -> list[FoodEntryRecord]:
        if not items:
            return items
        users = self.user_repository.get_users({item.user_id for item in items})
        names = {user.id: user.user_name for user in users}
        return [replace(item, user_name=names.get(item.user_id)) for item in items]


def _listing_target(actor: Principal, user_id: UUID | None) -> UUID | None:
    if user_id is None and not actor.is_admin:
        return actor.user_id
    return user_id


def _build_draft(
    user_id: UUID, payload: FoodEntryInput, timezone: str | tzinfo | None
) -> FoodEntryDraft:
    food_name = (payload.food_name or "").strip()
    missing = [
        name
        for name, value in (
            ("food_name", food_name),
            ("calories", payload.calories),
            ("price", payload.price),
        )
        if value is None or value == ""
    ]
    if missing:
        raise ValidationError(f"Form Values are missing: {', '.join(missing)}")
    calories = _amount("calories", payload.calories)
    price = _amount("price", payload.price)
    return FoodEntryDraft(
        user_id=user_id,
        food_name=food_name,
        calories=calories,
        price=price,
        date_taken=_date_taken(payload.date_taken, timezone),
    )


def _date_taken(value: datetime | None, timezone: str | tzinfo | None) -> datetime:
    if value is None:
        return datetime.now(tz=UTC)
    # The day and month around the date must stay inside the datetime range.
    try:
        date_taken = as_utc(value)
        for granularity in Granularity:
            bucket_of(date_taken, timezone, granularity)
    except (OverflowError, ValueError) as exc:
        raise ValidationError("date_taken is out of range") from exc
    return date_taken


def _amount(name: str, value: Decimal | None) -> Decimal:
    if value is None or not value.is_finite() or value < 0:
        raise ValidationError(f"{name} must be a non-negative number")
    return round_amount(value)
