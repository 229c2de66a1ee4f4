"""Food entry endpoints."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from calorie_tracker.api.auth import get_container, get_principal
from calorie_tracker.api.schemas import (
    FoodEntryPayload,
    localize,
    serialize_bucket,
    serialize_entry,
    serialize_page,
)
from calorie_tracker.domain.models import Principal  # noqa: TC001

if TYPE_CHECKING:
    from calorie_tracker.services.entries import EntryMutationResult

router = APIRouter(prefix="/foodEntry", tags=["food-entries"])


@router.post("/create")
async def create_entry(
    payload: FoodEntryPayload,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Log a food entry and report any limit it pushed the user over."""
    service = get_container(request).food_entry_service
    result = service.create_entry(principal, payload.to_input(), payload.timezone)
    return _mutation_response("Food Entry Successfully Created", result)


@router.get("/user")
async def list_user_entries(  # noqa: PLR0913
    request: Request,
    user_id: UUID | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    timezone: str | None = None,
    page: int = 1,
    limit: int = 10,
    populate_user: bool = False,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Return a user's entries ordered by date taken."""
    result = get_container(request).food_entry_service.list_entries(
        principal,
        user_id=user_id,
        start=localize(start_date, timezone),
        end=localize(end_date, timezone),
        page=page,
        limit=limit,
        populate_user=populate_user,
    )
    return {
        "food_entries": serialize_page(
            result, [serialize_entry(entry) for entry in result.items]
        )
    }


@router.get("/user/days")
async def list_user_entry_days(  # noqa: PLR0913
    request: Request,
    user_id: UUID | None = None,
    timezone: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    page: int = 1,
    limit: int = 10,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Return daily calorie totals, most recent day first."""
    result = get_container(request).food_entry_service.list_entry_days(
        principal,
        user_id=user_id,
        timezone=timezone,
        start=localize(start_date, timezone),
        end=localize(end_date, timezone),
        page=page,
        limit=limit,
    )
    return {
        "food_entry_days": serialize_page(
            result, [serialize_bucket(bucket) for bucket in result.items]
        )
    }


@router.get("/allUsers")
async def list_all_entries(
    request: Request,
    page: int = 1,
    limit: int = 10,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Return every user's entries, newest first."""
    result = get_container(request).food_entry_service.list_all_entries(
        principal, page=page, limit=limit
    )
    return {
        "food_entries": serialize_page(
            result, [serialize_entry(entry) for entry in result.items]
        )
    }


@router.put("/{entry_id}")
async def update_entry(
    entry_id: UUID,
    payload: FoodEntryPayload,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Replace a food entry and report limits reached for its date."""
    service = get_container(request).food_entry_service
    result = service.update_entry(
        principal, entry_id, payload.to_input(), payload.timezone
    )
    return _mutation_response("Successfully Updated", result)


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: UUID,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, str]:
    """Delete a food entry."""
    get_container(request).food_entry_service.delete_entry(principal, entry_id)
    return {"message": "Successfully Deleted"}


def _mutation_response(message: str, result: EntryMutationResult) -> dict[str, object]:
    return {
        "message": message,
        "calorie_limit_exceeded": result.warnings.calorie,
        "price_limit_exceeded": result.warnings.price,
        "food": serialize_entry(result.entry),
    }
