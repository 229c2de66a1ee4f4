"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from calorie_tracker.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from calorie_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from calorie_tracker.domain.models import FoodEntryDraft, Role
from calorie_tracker.domain.queries import EntryOrder, build_entry_query


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None
    count: int | None = None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    counts: list[int] = field(default_factory=list)
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)
    last_range: tuple[int, int] | None = None
    last_order: tuple[str, bool] | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args: str, count: str | None = None) -> "FakeTable":
        self._action = "select"
        self._count = count
        self.last_filters = []
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        self.last_filters = []
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        self.last_filters = []
        return self

    def _filter(self, op: str, column: str, value: object) -> "FakeTable":
        self.last_filters.append((op, column, value))
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("eq", column, value)

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("in", column, value)

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("ilike", column, value)

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("gte", column, value)

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("lt", column, value)

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        return self._filter("lte", column, value)

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def range(self, start: int, end: int) -> "FakeTable":
        self.last_range = (start, end)
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        if action == "select" and getattr(self, "_count", None):
            return FakeResponse(data=[], count=self.counts.pop(0))
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _user_row(user_id: str, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": user_id,
        "email": "alice@example.com",
        "user_name": "alice",
        "role": "User",
        "calorie_limit": 2100,
        "price_limit": "1000.00",
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": None,
    }
    row.update(overrides)
    return row


def _entry_row(entry_id: str, user_id: str) -> dict[str, object]:
    return {
        "id": entry_id,
        "user_id": user_id,
        "food_name": "Soup",
        "calories": 350.5,
        "price": "12.30",
        "date_taken": "2024-01-15T12:00:00+00:00",
        "created_at": "2024-01-15T12:00:01+00:00",
        "updated_at": "2024-01-15T12:00:01+00:00",
    }


def test_supabase_user_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user_id = str(uuid4())
    users_table.queue("insert", [_user_row(user_id)])
    users_table.queue("select", [_user_row(user_id)])

    repository = SupabaseUserRepository(client)
    created = repository.create_user(
        "alice@example.com", "alice", Role.USER, Decimal(2100), Decimal(1000)
    )
    fetched = repository.get_by_email("alice@example.com")

    assert str(created.id) == user_id
    assert users_table.last_payload == {
        "email": "alice@example.com",
        "user_name": "alice",
        "role": "User",
        "calorie_limit": "2100",
        "price_limit": "1000",
    }
    assert fetched is not None
    assert fetched.calorie_limit == Decimal(2100)
    assert fetched.price_limit == Decimal("1000.00")
    assert fetched.created_at == datetime(2024, 1, 1, tzinfo=UTC)


def test_supabase_user_repository_null_limits() -> None:
    client = FakeSupabaseClient()
    user_id = str(uuid4())
    client.table("users").queue(
        "select", [_user_row(user_id, calorie_limit=None, role="Admin")]
    )

    user = SupabaseUserRepository(client).get_first_admin()

    assert user is not None
    assert user.is_admin
    assert user.calorie_limit is None


def test_supabase_user_repository_lookups_escape_wildcards() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")

    result = SupabaseUserRepository(client).get_by_user_name("al_ice%")

    assert result is None
    assert users_table.last_filters == [("ilike", "user_name", "al\\_ice\\%")]


def test_supabase_user_repository_list_and_count() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    users_table.queue("select", [_user_row(str(uuid4()))])
    users_table.counts.append(7)
    repository = SupabaseUserRepository(client)

    users = repository.list_users(Role.USER, "ali", offset=10, limit=5)
    assert users_table.last_range == (10, 14)
    assert users_table.last_order == ("user_name", False)
    total = repository.count_users(Role.USER, None)

    assert [user.user_name for user in users] == ["alice"]
    assert total == 7
    assert users_table.last_filters == [("eq", "role", "User")]


def test_supabase_user_repository_delete_counts_rows() -> None:
    client = FakeSupabaseClient()
    user_id = uuid4()
    client.table("users").queue("delete", [_user_row(str(user_id))])
    repository = SupabaseUserRepository(client)

    assert repository.delete_user(user_id) == 1
    assert repository.delete_user(user_id) == 0


def test_supabase_food_entry_repository_create() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_entries")
    entry_id, user_id = str(uuid4()), str(uuid4())
    table.queue("insert", [_entry_row(entry_id, user_id)])
    draft = FoodEntryDraft(
        user_id=uuid4(),
        food_name="Soup",
        calories=Decimal("350.50"),
        price=Decimal("12.30"),
        date_taken=datetime(2024, 1, 15, 12, tzinfo=UTC),
    )

    entry = SupabaseFoodEntryRepository(client).create_entry(draft)

    assert str(entry.id) == entry_id
    assert entry.calories == Decimal("350.5")
    assert entry.price == Decimal("12.30")
    assert entry.date_taken == datetime(2024, 1, 15, 12, tzinfo=UTC)
    assert table.last_payload == {
        "user_id": str(draft.user_id),
        "food_name": "Soup",
        "calories": "350.50",
        "price": "12.30",
        "date_taken": "2024-01-15T12:00:00+00:00",
    }


def test_supabase_food_entry_repository_query_filters() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_entries")
    user_id = uuid4()
    table.queue("select", [_entry_row(str(uuid4()), str(user_id))])
    repository = SupabaseFoodEntryRepository(client)
    query = build_entry_query(
        user_id,
        datetime(2024, 1, 1, tzinfo=UTC),
        datetime(2024, 2, 1, tzinfo=UTC),
    )

    entries = repository.list_entries(query)

    assert len(entries) == 1
    assert table.last_filters == [
        ("eq", "user_id", str(user_id)),
        ("gte", "date_taken", "2024-01-01T00:00:00+00:00"),
        ("lt", "date_taken", "2024-02-01T00:00:00+00:00"),
    ]
    assert table.last_range == (1000, 1999)


def test_supabase_food_entry_repository_page_and_count() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_entries")
    table.counts.append(42)
    repository = SupabaseFoodEntryRepository(client)
    query = build_entry_query(end=datetime(2024, 2, 1, tzinfo=UTC), end_inclusive=True)

    page = repository.list_entries_page(query, 20, 10, EntryOrder.CREATED_DESC)
    assert table.last_filters == [("lte", "date_taken", "2024-02-01T00:00:00+00:00")]
    assert table.last_order == ("created_at", True)
    assert table.last_range == (20, 29)

    assert page == []
    assert repository.count_entries(query) == 42


def test_supabase_food_entry_repository_update_and_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_entries")
    entry_id, user_id = uuid4(), uuid4()
    table.queue("delete", [_entry_row(str(entry_id), str(user_id))] * 3)
    draft = FoodEntryDraft(
        user_id=user_id,
        food_name="Soup",
        calories=Decimal("1.00"),
        price=Decimal("1.00"),
        date_taken=datetime(2024, 1, 15, tzinfo=UTC),
    )
    repository = SupabaseFoodEntryRepository(client)

    assert repository.update_entry(entry_id, draft) is None
    assert isinstance(table.last_payload, dict)
    assert "updated_at" in table.last_payload
    assert repository.delete_entries_by_user(user_id) == 3
    assert table.last_filters == [("eq", "user_id", str(user_id))]


@dataclass
class CappedTable:
    """Table that serves stored rows by range but never more than ``cap``."""

    rows: list[dict[str, object]]
    cap: int
    requested_ranges: list[tuple[int, int]] = field(default_factory=list)

    def select(self, *_args: str) -> "CappedTable":
        self._range = (0, len(self.rows) - 1)
        return self

    def eq(self, _column: str, _value) -> "CappedTable":  # type: ignore[no-untyped-def]
        return self

    def order(self, _column: str, desc: bool = False) -> "CappedTable":
        return self

    def range(self, start: int, end: int) -> "CappedTable":
        self._range = (start, end)
        self.requested_ranges.append((start, end))
        return self

    def execute(self) -> FakeResponse:
        start, end = self._range
        stop = min(end + 1, start + self.cap)
        return FakeResponse(data=self.rows[start:stop])


@dataclass
class CappedClient:
    table_: CappedTable

    def table(self, _name: str) -> CappedTable:
        return self.table_


def test_supabase_food_entry_repository_reads_past_row_cap() -> None:
    user_id = str(uuid4())
    rows = [_entry_row(str(uuid4()), user_id) for _ in range(2500)]
    table = CappedTable(rows=rows, cap=1000)
    repository = SupabaseFoodEntryRepository(CappedClient(table), batch_size=1200)

    entries = repository.list_entries(build_entry_query(UUID(user_id)))

    assert len(entries) == 2500
    assert sum(entry.calories for entry in entries) == Decimal("350.5") * 2500
    assert table.requested_ranges[:3] == [(0, 1199), (1000, 2199), (2000, 3199)]
    assert table.requested_ranges[-1] == (2500, 3699)
