"""Supabase repository for food entries."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.adapters.supabase_rows import parse_timestamp
from calorie_tracker.domain.models import FoodEntryDraft, FoodEntryRecord, to_decimal
from calorie_tracker.domain.queries import EntryOrder, EntryQuery
from calorie_tracker.services.repositories import FoodEntryRepository

_COLUMNS = "id, user_id, food_name, calories, price, date_taken, created_at, updated_at"
_MISSING_DATE = datetime.min.replace(tzinfo=UTC)
# PostgREST truncates responses at its max_rows setting.
DEFAULT_BATCH_SIZE = 1000


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase implementation for food entry persistence."""

    client: Client
    batch_size: int = DEFAULT_BATCH_SIZE

    def get_entry(self, entry_id: UUID) -> FoodEntryRecord | None:
        """Return an entry by id, if present."""
        response = (
            self.client.table("food_entries")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        return _parse_row(response.data[0]) if response.data else None

    def list_entries(self, query: EntryQuery) -> list[FoodEntryRecord]:
        """Return all entries matching the query, oldest date_taken first.

        Rows are fetched in batches until an empty batch comes back, so a
        server-side row cap smaller than ``batch_size`` cannot drop rows.
        """
        entries: list[FoodEntryRecord] = []
        while True:
            request = _apply_query(
                self.client.table("food_entries").select(_COLUMNS), query
            )
            offset = len(entries)
            response = (
                request.order("date_taken", desc=False)
                .order("id", desc=False)
                .range(offset, offset + self.batch_size - 1)
                .execute()
            )
            rows = response.data or []
            if not rows:
                return entries
            entries.extend(_parse_row(row) for row in rows)

    def list_entries_page(
        self, query: EntryQuery, offset: int, limit: int, order: EntryOrder
    ) -> list[FoodEntryRecord]:
        """Return one page of entries matching the query."""
        request = _apply_query(
            self.client.table("food_entries").select(_COLUMNS), query
        )
        if order is EntryOrder.CREATED_DESC:
            request = request.order("created_at", desc=True)
        else:
            request = request.order("date_taken", desc=False)
        response = request.range(offset, offset + limit - 1).execute()
        return [_parse_row(row) for row in response.data or []]

    def count_entries(self, query: EntryQuery) -> int:
        """Count entries matching the query."""
        request = _apply_query(
            self.client.table("food_entries").select("id", count="exact"), query
        )
        response = request.execute()
        return response.count or 0

    def create_entry(self, draft: FoodEntryDraft) -> FoodEntryRecord:
        """Insert an entry row and return it."""
        response = (
            self.client.table("food_entries").insert(_draft_payload(draft)).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry")
        return _parse_row(response.data[0])

    def update_entry(
        self, entry_id: UUID, draft: FoodEntryDraft
    ) -> FoodEntryRecord | None:
        """Replace an entry row's values and return it."""
        payload = _draft_payload(draft)
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table("food_entries")
            .update(payload)
            .eq("id", str(entry_id))
            .execute()
        )
        return _parse_row(response.data[0]) if response.data else None

    def delete_entry(self, entry_id: UUID) -> int:
        """Delete an entry row and return how many rows were removed."""
        response = (
            self.client.table("food_entries").delete().eq("id", str(entry_id)).execute()
        )
        return len(response.data or [])

    def delete_entries_by_user(self, user_id: UUID) -> int:
        """Delete all entries of a user and return how many were removed."""
        response = (
            self.client.table("food_entries")
            .delete()
            .eq("user_id", str(user_id))
            .execute()
        )
        return len(response.data or [])


def _apply_query(request, query: EntryQuery):  # type: ignore[no-untyped-def]
    if query.user_id is not None:
        request = request.eq("user_id", str(query.user_id))
    if query.start is not None:
        request = request.gte("date_taken", query.start.isoformat())
    if query.end is not None:
        if query.end_inclusive:
            request = request.lte("date_taken", query.end.isoformat())
        else:
            request = request.lt("date_taken", query.end.isoformat())
    return request


def _draft_payload(draft: FoodEntryDraft) -> dict[str, object]:
    return {
        "user_id": str(draft.user_id),
        "food_name": draft.food_name,
        "calories": str(draft.calories),
        "price": str(draft.price),
        "date_taken": draft.date_taken.isoformat(),
    }


def _parse_row(row: dict[str, object]) -> FoodEntryRecord:
    return FoodEntryRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        food_name=str(row.get("food_name", "")),
        calories=to_decimal(row.get("calories")),
        price=to_decimal(row.get("price")),
        date_taken=parse_timestamp(row.get("date_taken")) or _MISSING_DATE,
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
