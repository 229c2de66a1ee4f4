"""Request models and response serializers."""

from datetime import datetime, tzinfo
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from calorie_tracker.domain.aggregation import Bucket, Page
from calorie_tracker.domain.models import (
    FoodEntryInput,
    FoodEntryRecord,
    UserRecord,
    round_amount,
)
from calorie_tracker.domain.periods import Granularity, resolve_timezone
from calorie_tracker.domain.reports import FleetReport, UserReport
from calorie_tracker.domain.warnings import warning_message


class FoodEntryPayload(BaseModel):
    """Body for creating or replacing a food entry."""

    user_id: UUID | None = None
    food_name: str | None = None
    calories: Decimal | None = None
    price: Decimal | None = None
    date_taken: datetime | None = None
    timezone: str | None = None

    def to_input(self) -> FoodEntryInput:
        return FoodEntryInput(
            food_name=self.food_name,
            calories=self.calories,
            price=self.price,
            date_taken=localize(self.date_taken, self.timezone),
            user_id=self.user_id,
        )


class CreateUserPayload(BaseModel):
    """Body for creating a user account."""

    email: str
    user_name: str


class UpdateLimitsPayload(BaseModel):
    """Body for changing a user's limits."""

    calorie_limit: Decimal
    price_limit: Decimal


def localize(value: datetime | None, timezone: str | tzinfo | None) -> datetime | None:
    """Interpret naive datetimes as wall-clock time in the request timezone."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=resolve_timezone(timezone))


def money(value: Decimal | None) -> str | None:
    """Render an amount as an exact two-decimal string."""
    return None if value is None else str(round_amount(value))


def serialize_entry(entry: FoodEntryRecord) -> dict[str, object]:
    data: dict[str, object] = {
        "id": str(entry.id),
        "user_id": str(entry.user_id),
        "food_name": entry.food_name,
        "calories": money(entry.calories),
        "price": money(entry.price),
        "date_taken": entry.date_taken.isoformat(),
        "created_at": entry.created_at.isoformat() if entry.created_at else None,
        "updated_at": entry.updated_at.isoformat() if entry.updated_at else None,
    }
    if entry.user_name is not None:
        data["user_name"] = entry.user_name
    return data


def serialize_user(user: UserRecord) -> dict[str, object]:
    return {
        "id": str(user.id),
        "email": user.email,
        "user_name": user.user_name,
        "role": user.role.value,
        "calorie_limit": money(user.calorie_limit),
        "price_limit": money(user.price_limit),
        "created_at": user.created_at.isoformat() if user.created_at else None,
        "updated_at": user.updated_at.isoformat() if user.updated_at else None,
    }


def serialize_bucket(
    bucket: Bucket, granularity: Granularity | None = None
) -> dict[str, object]:
    data: dict[str, object] = {
        "period": bucket.key,
        "start": bucket.start.isoformat(),
        "end": bucket.end.isoformat(),
        "amount": money(bucket.total),
    }
    if granularity is not None:
        data["message"] = warning_message(bucket, granularity)
    return data


def serialize_page(page: Page, items: list[dict[str, object]]) -> dict[str, object]:
    return {
        "items": items,
        "page": page.page,
        "limit": page.limit,
        "total_count": page.total_count,
    }


def serialize_fleet_report(report: FleetReport) -> dict[str, object]:
    return {
        "last_week_avg": money(report.last_week_average),
        "two_weeks_before_avg": money(report.prior_week_average),
        "last_week_entries": report.last_week_entries,
        "two_weeks_before_entries": report.prior_week_entries,
        "windows": _serialize_windows(report),
    }


def serialize_user_report(report: UserReport) -> dict[str, object]:
    return {
        "user_id": str(report.user_id),
        "last_week_calories": money(report.last_week_calories),
        "two_weeks_before_calories": money(report.prior_week_calories),
        "last_week_entries": report.last_week_entries,
        "two_weeks_before_entries": report.prior_week_entries,
        "windows": _serialize_windows(report),
    }


def _serialize_windows(report: FleetReport | UserReport) -> dict[str, str]:
    windows = report.windows
    return {
        "current_start": windows.current_start.isoformat(),
        "current_end": windows.current_end.isoformat(),
        "prior_start": windows.prior_start.isoformat(),
        "prior_end": windows.prior_end.isoformat(),
    }
