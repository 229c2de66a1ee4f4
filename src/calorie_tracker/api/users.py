"""User account, report and warning endpoints."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request

from calorie_tracker.api.auth import get_container, get_principal
from calorie_tracker.api.schemas import (
    CreateUserPayload,
    UpdateLimitsPayload,
    localize,
    serialize_bucket,
    serialize_fleet_report,
    serialize_page,
    serialize_user,
    serialize_user_report,
)
from calorie_tracker.domain.models import Principal  # noqa: TC001
from calorie_tracker.services.warnings import WarningListing  # noqa: TC001

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/create")
async def create_user(
    payload: CreateUserPayload,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Create a user with default limits and return its token."""
    issued = get_container(request).user_service.create_user(
        principal, payload.email, payload.user_name
    )
    return {
        "message": "User Created Successfully",
        "token": issued.token,
        "user": serialize_user(issued.user),
    }


@router.get("/getUserByToken")
async def get_user_by_token(
    request: Request, principal: Principal = Depends(get_principal)
) -> dict[str, object]:
    """Return the account behind the bearer token."""
    user = get_container(request).user_service.get_current_user(principal)
    return serialize_user(user)


@router.get("/getUserToken")
async def get_user_token(
    request: Request,
    email: str,
    principal: Principal = Depends(get_principal),
) -> dict[str, str]:
    """Issue a token for the user with the given email."""
    token = get_container(request).user_service.issue_token(principal, email)
    return {"token": token}


@router.get("/allUsers")
async def list_users(
    request: Request,
    page: int = 1,
    limit: int = 10,
    user_name: str | None = None,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Return regular users ordered by name."""
    result = get_container(request).user_service.list_users(
        principal, page=page, limit=limit, user_name=user_name
    )
    return serialize_page(result, [serialize_user(user) for user in result.items])


@router.get("/report")
async def fleet_report(
    request: Request, principal: Principal = Depends(get_principal)
) -> dict[str, object]:
    """Compare average calories per user for the last two weeks."""
    report = get_container(request).report_service.fleet_report(principal)
    return serialize_fleet_report(report)


@router.get("/report/{user_id}")
async def user_report(
    user_id: UUID,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Compare one user's calories for the last two weeks."""
    report = get_container(request).report_service.user_report(principal, user_id)
    return serialize_user_report(report)


@router.get("/warning/calorie")
async def calorie_warnings(  # noqa: PLR0913
    request: Request,
    user_id: UUID = Query(alias="id"),
    timezone: str | None = None,
    on: datetime | None = Query(default=None, alias="date"),
    page: int = 1,
    limit: int = 10,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Return days on which the user reached the calorie limit."""
    listing = get_container(request).warning_service.calorie_warnings(
        principal,
        user_id,
        timezone=timezone,
        on=localize(on, timezone),
        page=page,
        limit=limit,
    )
    return _warning_response(listing)


@router.get("/warning/price")
async def price_warnings(  # noqa: PLR0913
    request: Request,
    user_id: UUID = Query(alias="id"),
    timezone: str | None = None,
    on: datetime | None = Query(default=None, alias="date"),
    page: int = 1,
    limit: int = 10,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Return months in which the user reached the price limit."""
    listing = get_container(request).warning_service.price_warnings(
        principal,
        user_id,
        timezone=timezone,
        on=localize(on, timezone),
        page=page,
        limit=limit,
    )
    return _warning_response(listing)


@router.put("/{user_id}/limits")
async def update_limits(
    user_id: UUID,
    payload: UpdateLimitsPayload,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Change a user's daily calorie and monthly price limits."""
    user = get_container(request).user_service.update_limits(
        principal, user_id, payload.calorie_limit, payload.price_limit
    )
    return serialize_user(user)


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    request: Request,
    principal: Principal = Depends(get_principal),
) -> dict[str, object]:
    """Delete a user and all of their food entries."""
    removed = get_container(request).user_service.delete_user(principal, user_id)
    return {"message": "User Successfully Deleted", "entries_removed": removed}


def _warning_response(listing: WarningListing) -> dict[str, object]:
    items = [
        serialize_bucket(bucket, listing.granularity) for bucket in listing.page.items
    ]
    return {
        "warnings": serialize_page(listing.page, items),
        "user": serialize_user(listing.user),
    }
