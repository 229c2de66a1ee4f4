"""Bucket aggregation, threshold evaluation and pagination."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Generic, TypeVar
from uuid import UUID

from calorie_tracker.domain.models import round_amount
from calorie_tracker.domain.periods import (
    Granularity,
    Period,
    bucket_of,
    resolve_timezone,
)
from calorie_tracker.errors import ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class Bucket:
    """Summed value for one calendar period."""

    key: str
    start: datetime
    end: datetime
    total: Decimal


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of an ordered result set."""

    items: list[T]
    page: int
    limit: int
    total_count: int


def aggregate(
    records: Iterable[tuple[datetime, Decimal]],
    granularity: Granularity,
    tz: str | tzinfo | None,
) -> list[Bucket]:
    """Group records by period and sum their values, most recent period first."""
    zone = resolve_timezone(tz)
    periods: dict[str, Period] = {}
    totals: dict[str, Decimal] = {}
    for timestamp, value in records:
        period = bucket_of(timestamp, zone, granularity)
        periods.setdefault(period.key, period)
        totals[period.key] = totals.get(period.key, Decimal(0)) + value
    return [
        Bucket(
            key=key,
            start=periods[key].start,
            end=periods[key].end,
            total=totals[key],
        )
        for key in sorted(totals, reverse=True)
    ]


def totals_by_key(
    records: Iterable[tuple[datetime, Decimal]],
    granularity: Granularity,
    tz: str | tzinfo | None,
) -> dict[str, Decimal]:
    """Return per-period totals keyed by bucket key."""
    return {
        bucket.key: bucket.total for bucket in aggregate(records, granularity, tz)
    }


def totals_by_owner(
    records: Iterable[tuple[UUID, Decimal]],
) -> dict[UUID, Decimal]:
    """Sum values per owner."""
    totals: dict[UUID, Decimal] = {}
    for owner, value in records:
        totals[owner] = totals.get(owner, Decimal(0)) + value
    return totals


def average_per_owner(totals: dict[UUID, Decimal]) -> Decimal:
    """Average of per-owner totals; zero when nobody has entries."""
    if not totals:
        return Decimal(0)
    return round_amount(sum(totals.values(), Decimal(0)) / len(totals))


def exceeding(buckets: Iterable[Bucket], limit: Decimal | None) -> list[Bucket]:
    """Return buckets whose total reached the limit; no limit means none."""
    if limit is None:
        return []
    return [bucket for bucket in buckets if bucket.total >= limit]


def validate_page(page: int, limit: int) -> None:
    """Reject non-positive page numbers and sizes."""
    if page < 1:
        raise ValidationError("page must be a positive integer")
    if limit < 1:
        raise ValidationError("limit must be a positive integer")


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def paginate(items: Sequence[T], page: int, limit: int) -> Page[T]:
    """Slice a sequence into a 1-indexed page."""
    validate_page(page, limit)
    skip = page_offset(page, limit)
    return Page(
        items=list(items[skip : skip + limit]),
        page=page,
        limit=limit,
        total_count=len(items),
    )
