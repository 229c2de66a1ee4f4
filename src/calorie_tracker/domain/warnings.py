"""Human-readable threshold warning messages."""

from dataclasses import dataclass
from decimal import Decimal

from calorie_tracker.domain.aggregation import Bucket
from calorie_tracker.domain.periods import Granularity, period_first_day

CALORIE_WARNING = (
    "You Have Reached your daily Calorie Threshold Limit for day {day}. "
    "Calorie amount on this day is {amount}"
)
PRICE_WARNING = (
    "You Have Reached your monthly price limit for month {month}. "
    "Price amount on this month is {amount}"
)


@dataclass(frozen=True)
class ThresholdWarnings:
    """Warnings produced after an entry write; empty strings when not reached."""

    calorie: str
    price: str


def format_amount(value: Decimal) -> str:
    """Render an amount without trailing zeros."""
    return f"{value.normalize():f}"


def calorie_warning(bucket: Bucket | None) -> str:
    if bucket is None:
        return ""
    day = period_first_day(bucket.key)
    return CALORIE_WARNING.format(
        day=day.strftime("%b %d, %Y"), amount=format_amount(bucket.total)
    )


def price_warning(bucket: Bucket | None) -> str:
    if bucket is None:
        return ""
    month = period_first_day(bucket.key)
    return PRICE_WARNING.format(
        month=month.strftime("%b, %Y"), amount=format_amount(bucket.total)
    )


def warning_message(bucket: Bucket, granularity: Granularity) -> str:
    """Render the message for one exceeded bucket of a listing."""
    if granularity is Granularity.DAY:
        return calorie_warning(bucket)
    return price_warning(bucket)


def format_warnings(
    calorie_buckets: list[Bucket], price_buckets: list[Bucket]
) -> ThresholdWarnings:
    """Build both messages from the exceeded daily and monthly buckets."""
    return ThresholdWarnings(
        calorie=calorie_warning(calorie_buckets[0] if calorie_buckets else None),
        price=price_warning(price_buckets[0] if price_buckets else None),
    )
