"""Weekly consumption reports for administrators."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import UUID

from calorie_tracker.domain.aggregation import average_per_owner, totals_by_owner
from calorie_tracker.domain.models import Principal, Role
from calorie_tracker.domain.queries import EntryQuery, build_entry_query
from calorie_tracker.domain.reports import FleetReport, ReportWindows, UserReport
from calorie_tracker.errors import NotFound
from calorie_tracker.services.access import enforce, require_role
from calorie_tracker.services.repositories import FoodEntryRepository, UserRepository

WINDOW = timedelta(days=7)
_ZERO = Decimal(0)


def report_windows(now: datetime) -> ReportWindows:
    """Return the last 7 days and the 7 days before them."""
    return ReportWindows(
        current_start=now - WINDOW,
        current_end=now,
        prior_start=now - 2 * WINDOW,
        prior_end=now - WINDOW,
    )


@dataclass
class ReportService:
    """Service comparing the last week of calories with the week before."""

    repository: FoodEntryRepository
    user_repository: UserRepository

    def fleet_report(
        self, actor: Principal, now: datetime | None = None
    ) -> FleetReport:
        """Return average calories per active user for both windows."""
        enforce(require_role(actor, Role.ADMIN))
        windows = report_windows(now or datetime.now(tz=UTC))
        current, prior = _window_queries(windows, user_id=None)
        return FleetReport(
            windows=windows,
            last_week_average=average_per_owner(self._calories_by_user(current)),
            prior_week_average=average_per_owner(self._calories_by_user(prior)),
            last_week_entries=self.repository.count_entries(current),
            prior_week_entries=self.repository.count_entries(prior),
        )

    def user_report(
        self, actor: Principal, user_id: UUID, now: datetime | None = None
    ) -> UserReport:
        """Return one user's calorie totals for both windows."""
        enforce(require_role(actor, Role.ADMIN))
        if self.user_repository.get_user(user_id) is None:
            raise NotFound("No user For Specific Id Exists")
        windows = report_windows(now or datetime.now(tz=UTC))
        current, prior = _window_queries(windows, user_id=user_id)
        return UserReport(
            user_id=user_id,
            windows=windows,
            last_week_calories=sum(self._calories_by_user(current).values(), _ZERO),
            prior_week_calories=sum(self._calories_by_user(prior).values(), _ZERO),
            last_week_entries=self.repository.count_entries(current),
            prior_week_entries=self.repository.count_entries(prior),
        )

    def _calories_by_user(self, query: EntryQuery) -> dict[UUID, Decimal]:
        entries = self.repository.list_entries(query)
        return totals_by_owner((entry.user_id, entry.calories) for entry in entries)


def _window_queries(
    windows: ReportWindows, user_id: UUID | None
) -> tuple[EntryQuery, EntryQuery]:
    current = build_entry_query(
        user_id, windows.current_start, windows.current_end, end_inclusive=True
    )
    prior = build_entry_query(user_id, windows.prior_start, windows.prior_end)
    return current, prior
