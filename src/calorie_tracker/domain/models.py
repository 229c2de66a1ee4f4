"""Domain models for users and food entries."""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from uuid import UUID

CENT = Decimal("0.01")


class Role(Enum):
    """Account roles."""

    USER = "User"
    ADMIN = "Admin"


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    email: str
    user_name: str
    role: Role
    calorie_limit: Decimal | None
    price_limit: Decimal | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class FoodEntryDraft:
    """Values written on create or full replace of a food entry."""

    user_id: UUID
    food_name: str
    calories: Decimal
    price: Decimal
    date_taken: datetime


@dataclass(frozen=True)
class FoodEntryRecord:
    """Food entry row."""

    id: UUID
    user_id: UUID
    food_name: str
    calories: Decimal
    price: Decimal
    date_taken: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user_name: str | None = None


@dataclass(frozen=True)
class Principal:
    """Authenticated caller decoded from an access token."""

    user_id: UUID
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def round_amount(value: Decimal) -> Decimal:
    """Round a stored amount to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: object) -> Decimal:
    """Convert a numeric value from JSON or the database into a Decimal."""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal(0)
    return Decimal(str(value))


@dataclass(frozen=True)
class FoodEntryInput:
    """Caller-supplied values for creating or replacing a food entry."""

    food_name: str | None
    calories: Decimal | None
    price: Decimal | None
    date_taken: datetime | None = None
    user_id: UUID | None = None
