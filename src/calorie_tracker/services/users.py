"""User account management."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from calorie_tracker.domain.aggregation import Page, page_offset, validate_page
from calorie_tracker.domain.models import Principal, Role, UserRecord, round_amount
from calorie_tracker.errors import Conflict, NotFound, Unauthorized, ValidationError
from calorie_tracker.services.access import enforce, require_role
from calorie_tracker.services.repositories import FoodEntryRepository, UserRepository
from calorie_tracker.services.tokens import TokenService

_logger = logging.getLogger(__name__)

DEFAULT_CALORIE_LIMIT = Decimal(2100)
DEFAULT_PRICE_LIMIT = Decimal(1000)


@dataclass(frozen=True)
class IssuedUser:
    """A user together with a freshly issued access token."""

    user: UserRecord
    token: str


@dataclass
class UserService:
    """Application service for account lifecycle actions."""

    repository: UserRepository
    entry_repository: FoodEntryRepository
    token_service: TokenService
    default_calorie_limit: Decimal = DEFAULT_CALORIE_LIMIT
    default_price_limit: Decimal = DEFAULT_PRICE_LIMIT

    def create_user(self, actor: Principal, email: str, user_name: str) -> IssuedUser:
        """Create a regular user with default limits and return its token."""
        enforce(require_role(actor, Role.ADMIN))
        email, user_name = _clean_identity(email, user_name)
        self._ensure_unique(email, user_name)

        user = self.repository.create_user(
            email=email,
            user_name=user_name,
            role=Role.USER,
            calorie_limit=self.default_calorie_limit,
            price_limit=self.default_price_limit,
        )
        _logger.info("User created: user_id=%s", user.id)
        return IssuedUser(user=user, token=self.token_service.issue(user))

    def delete_user(self, actor: Principal, user_id: UUID) -> int:
        """Delete a user and all of their entries; return the entries removed."""
        enforce(require_role(actor, Role.ADMIN))
        if self.repository.delete_user(user_id) == 0:
            raise NotFound("No user For Specific Id Exists")
        removed = self.entry_repository.delete_entries_by_user(user_id)
        _logger.info("User deleted: user_id=%s entries_removed=%s", user_id, removed)
        return removed

    def get_current_user(self, actor: Principal) -> UserRecord:
        """Return the account behind the caller's token."""
        user = self.repository.get_user(actor.user_id)
        if user is None:
            raise Unauthorized("Invalid Token")
        return user

    def issue_token(self, actor: Principal, email: str) -> str:
        """Issue a token for the user with ``email``."""
        enforce(require_role(actor, Role.ADMIN))
        user = self.repository.get_by_email(email.strip().lower())
        if user is None:
            raise NotFound("Invalid Email")
        return self.token_service.issue(user)

    def list_users(
        self,
        actor: Principal,
        page: int = 1,
        limit: int = 10,
        user_name: str | None = None,
    ) -> Page[UserRecord]:
        """Return regular users ordered by name, optionally filtered by name."""
        enforce(require_role(actor, Role.ADMIN))
        validate_page(page, limit)
        name_filter = user_name.strip() if user_name and user_name.strip() else None
        return Page(
            items=self.repository.list_users(
                Role.USER, name_filter, page_offset(page, limit), limit
            ),
            page=page,
            limit=limit,
            total_count=self.repository.count_users(Role.USER, name_filter),
        )

    def update_limits(
        self,
        actor: Principal,
        user_id: UUID,
        calorie_limit: Decimal,
        price_limit: Decimal,
    ) -> UserRecord:
        """Change a user's limits; the new values apply to every past period."""
        enforce(require_role(actor, Role.ADMIN))
        limits = (("calorie_limit", calorie_limit), ("price_limit", price_limit))
        for name, value in limits:
            if not value.is_finite() or value < 0:
                raise ValidationError(f"{name} must be a non-negative number")
        user = self.repository.update_limits(
            user_id, round_amount(calorie_limit), round_amount(price_limit)
        )
        if user is None:
            raise NotFound("No user For Specific Id Exists")
        _logger.info("User limits updated: user_id=%s", user_id)
        return user

    def ensure_admin(self, email: str, user_name: str) -> IssuedUser:
        """Return the admin account, creating it on first use, with a token."""
        admin = self.repository.get_first_admin()
        if admin is None:
            email, user_name = _clean_identity(email, user_name)
            admin = self.repository.create_user(
                email=email,
                user_name=user_name,
                role=Role.ADMIN,
                calorie_limit=self.default_calorie_limit,
                price_limit=self.default_price_limit,
            )
            _logger.info("Admin user created: user_id=%s", admin.id)
        return IssuedUser(user=admin, token=self.token_service.issue(admin))

    def _ensure_unique(self, email: str, user_name: str) -> None:
        if self.repository.get_by_email(email) is not None:
            raise Conflict("Email already exists")
        if self.repository.get_by_user_name(user_name) is not None:
            raise Conflict("User Name already exists")


def _clean_identity(email: str | None, user_name: str | None) -> tuple[str, str]:
    cleaned_email = (email or "").strip().lower()
    cleaned_name = (user_name or "").strip()
    if not cleaned_email or not cleaned_name:
        raise ValidationError("Email and user name are required")
    if "@" not in cleaned_email:
        raise ValidationError("Email is not valid")
    return cleaned_email, cleaned_name
