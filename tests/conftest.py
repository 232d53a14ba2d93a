import uuid
from datetime import datetime, timedelta, timezone

import pytest
from postgrest.exceptions import APIError


# ---------------- In-memory Supabase mock ----------------
class FakeTable:
    def __init__(self, name, client):
        self.name = name
        self.client = client
        self._data = client.db.setdefault(name, [])
        self._mode = "select"
        self._columns = "*"
        self._payload = None
        self._filters = []
        self._order = None
        self._range = None
        self._limit = None

    def select(self, columns="*", **kwargs):
        self._mode = "select"
        self._columns = columns
        return self

    def insert(self, data):
        self._mode = "insert"
        self._payload = data
        return self

    def update(self, data):
        self._mode = "update"
        self._payload = data
        return self

    def delete(self):
        self._mode = "delete"
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def ilike(self, column, pattern):
        needle = pattern.strip("%").lower()
        self._filters.append(lambda row: needle in str(row.get(column) or "").lower())
        return self

    def gte(self, column, value):
        self._filters.append(lambda row: str(row.get(column)) >= value)
        return self

    def lte(self, column, value):
        self._filters.append(lambda row: str(row.get(column)) <= value)
        return self

    def order(self, column, desc=False):
        self._order = (column, bool(desc))
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matches(self, row):
        return all(check(row) for check in self._filters)

    def execute(self):
        self.client.calls.append((self.name, self._mode))
        if (self.name, self._mode) in self.client.fail_on:
            raise APIError({"message": f"{self.name} {self._mode} failed", "code": "500"})

        if self._mode == "insert":
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            created = []
            for item in items:
                row = dict(item)
                row.setdefault("id", uuid.uuid4().hex)
                row.setdefault("created_at", self.client.next_timestamp())
                self._data.append(row)
                created.append(dict(row))
            return _Response(created)

        if self._mode == "update":
            updated = []
            for row in self._data:
                if self._matches(row):
                    row.update(self._payload)
                    updated.append(dict(row))
            return _Response(updated)

        if self._mode == "delete":
            removed = [row for row in self._data if self._matches(row)]
            self._data[:] = [row for row in self._data if not self._matches(row)]
            return _Response([dict(row) for row in removed])

        rows = [dict(row) for row in self._data if self._matches(row)]
        if self._order:
            column, desc = self._order
            rows.sort(key=lambda row: row.get(column) or "", reverse=desc)
        if self._range:
            start, end = self._range
            rows = rows[start : end + 1]
        if self._limit is not None:
            rows = rows[: self._limit]
        if "UserTag(*)" in self._columns:
            tags = {row["id"]: row for row in self.client.db.get("UserTag", [])}
            for row in rows:
                tag = tags.get(row.get("user_tag_id"))
                row["UserTag"] = dict(tag) if tag else None
        return _Response(rows)


class _Response:
    def __init__(self, data):
        self.data = data


class FakeSupabase:
    """Chainable stand-in for ``supabase.Client`` backed by dict tables."""

    def __init__(self, db=None):
        self.db = db if db is not None else {}
        self.calls = []
        self.fail_on = set()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def table(self, name):
        return FakeTable(name, self)

    def next_timestamp(self):
        self._clock += timedelta(minutes=1)
        return self._clock.isoformat()

    def count(self, table, mode):
        return sum(1 for call in self.calls if call == (table, mode))


@pytest.fixture
def fake_client():
    return FakeSupabase()


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
