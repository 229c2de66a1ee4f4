"""Structured filters for food entry queries."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from calorie_tracker.domain.periods import Period, as_utc


@dataclass(frozen=True)
class EntryQuery:
    """Filter on entry owner and a date_taken range."""

    user_id: UUID | None = None
    start: datetime | None = None
    end: datetime | None = None
    end_inclusive: bool = False


def build_entry_query(
    user_id: UUID | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    *,
    end_inclusive: bool = False,
) -> EntryQuery:
    """Build an entry query, normalizing bounds to UTC."""
    return EntryQuery(
        user_id=user_id,
        start=as_utc(start) if start else None,
        end=as_utc(end) if end else None,
        end_inclusive=end_inclusive,
    )


def period_query(user_id: UUID | None, period: Period) -> EntryQuery:
    """Build a query covering exactly one calendar period."""
    return build_entry_query(user_id, period.start, period.end)


class EntryOrder(Enum):
    """Sort orders supported by paged entry listings."""

    DATE_TAKEN_ASC = "date_taken_asc"
    CREATED_DESC = "created_desc"
