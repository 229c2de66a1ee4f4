"""Row parsing helpers shared by the Supabase repositories."""

from datetime import datetime


def parse_timestamp(raw: object) -> datetime | None:
    """Parse an ISO timestamp column, returning None when empty."""
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so a value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
