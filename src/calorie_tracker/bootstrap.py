"""Create the admin account if needed and print its access token."""

import logging

from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer, build_container

_logger = logging.getLogger(__name__)


def main(container: AppContainer | None = None) -> None:
    """Ensure an admin user exists and print a token for it."""
    resolved = container or build_container()
    configure_logging(resolved.settings.log_level)
    issued = resolved.user_service.ensure_admin(
        email=resolved.settings.admin_email,
        user_name=resolved.settings.admin_user_name,
    )
    _logger.info("Admin user ready: user_id=%s", issued.user.id)
    print(f"Admin token: {issued.token}")  # noqa: T201


if __name__ == "__main__":
    main()
