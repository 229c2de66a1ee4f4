"""Bearer token authentication for API routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from calorie_tracker.domain.models import Principal  # noqa: TC001
from calorie_tracker.errors import Unauthorized

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer

_BEARER_PREFIX = "Bearer "


def get_container(request: Request) -> AppContainer:
    """Return the dependency container attached to the app."""
    return request.app.state.container


async def get_principal(
    request: Request, authorization: str | None = Header(default=None)
) -> Principal:
    """Decode the caller from the ``Authorization: Bearer`` header."""
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        raise Unauthorized("Authentication Failed")
    token = authorization.removeprefix(_BEARER_PREFIX).strip()
    return get_container(request).token_service.decode(token)
