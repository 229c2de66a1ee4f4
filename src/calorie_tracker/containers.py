"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from calorie_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from calorie_tracker.config import Settings
from calorie_tracker.services.entries import FoodEntryService
from calorie_tracker.services.repositories import FoodEntryRepository, UserRepository
from calorie_tracker.services.reports import ReportService
from calorie_tracker.services.tokens import TokenService
from calorie_tracker.services.users import UserService
from calorie_tracker.services.warnings import WarningService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_service: TokenService
    user_service: UserService
    food_entry_service: FoodEntryService
    warning_service: WarningService
    report_service: ReportService


def build_services(
    settings: Settings,
    user_repository: UserRepository,
    entry_repository: FoodEntryRepository,
) -> AppContainer:
    """Wire services on top of the given repositories."""
    token_service = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_minutes=settings.jwt_ttl_minutes,
    )
    return AppContainer(
        settings=settings,
        token_service=token_service,
        user_service=UserService(
            repository=user_repository,
            entry_repository=entry_repository,
            token_service=token_service,
            default_calorie_limit=settings.default_calorie_limit,
            default_price_limit=settings.default_price_limit,
        ),
        food_entry_service=FoodEntryService(entry_repository, user_repository),
        warning_service=WarningService(entry_repository, user_repository),
        report_service=ReportService(entry_repository, user_repository),
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    return build_services(
        resolved_settings,
        user_repository=SupabaseUserRepository(supabase_client),
        entry_repository=SupabaseFoodEntryRepository(supabase_client),
    )
