"""Domain models for consumption reports."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class ReportWindows:
    """Current and prior 7-day reporting windows."""

    current_start: datetime
    current_end: datetime
    prior_start: datetime
    prior_end: datetime


@dataclass(frozen=True)
class FleetReport:
    """Average calories per active user and entry counts for both windows."""

    windows: ReportWindows
    last_week_average: Decimal
    prior_week_average: Decimal
    last_week_entries: int
    prior_week_entries: int


@dataclass(frozen=True)
class UserReport:
    """Calorie totals and entry counts for one user in both windows."""

    user_id: UUID
    windows: ReportWindows
    last_week_calories: Decimal
    prior_week_calories: Decimal
    last_week_entries: int
    prior_week_entries: int
