"""Role and ownership checks.

The checks return the error instead of raising it so callers decide how the
failure ends their flow.
"""

from uuid import UUID

from calorie_tracker.domain.models import Principal, Role
from calorie_tracker.errors import Forbidden


def authorize(actor: Principal, target_user_id: UUID | None) -> Forbidden | None:
    """Allow admins, and users acting on their own records.

    A missing target is allowed for admins only.
    """
    if actor.is_admin:
        return None
    if target_user_id == actor.user_id:
        return None
    return Forbidden("You cant access other user record")


def require_role(actor: Principal, role: Role) -> Forbidden | None:
    """Allow only callers holding ``role``."""
    if actor.role is role:
        return None
    return Forbidden("Authentication Failed")


def enforce(result: Forbidden | None) -> None:
    """Raise the error from a failed check."""
    if result is not None:
        raise result
