"""
Pytest configuration and fixtures for Campus Match tests.
"""

import os
import pytest

from postgrest.exceptions import APIError

# Set test environment before importing campus_match modules
os.environ["APP_ENV"] = "development"
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key-not-real")

from campus_match.web.auth import AuthenticatedUser
from onboarding.errors import UploadError
from onboarding.state import CampusBuilding, PhotoAsset, ProfileDraft


# ---------------------------------------------------------------------------
# In-memory store with the PostgREST fluent API
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """One table() call: accumulates the builder chain, runs on execute()."""

    def __init__(self, store: "FakeStore", table: str):
        self.store = store
        self.table_name = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self._order = None
        self._limit = None

    def select(self, columns: str = "*"):
        self.op = "select"
        return self

    def insert(self, rows):
        self.op = "insert"
        self.payload = rows
        return self

    def update(self, values: dict):
        self.op = "update"
        self.payload = values
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc: bool = False):
        self._order = (column, desc)
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self.filters)

    def execute(self) -> FakeResponse:
        self.store.calls.append((self.table_name, self.op))
        if self.store.before_execute:
            self.store.before_execute(self)

        failure = self.store.failures.get((self.table_name, self.op))
        if failure is not None:
            raise failure

        rows = self.store.tables.setdefault(self.table_name, [])

        if self.op == "select":
            result = [dict(r) for r in rows if self._matches(r)]
            if self._order:
                column, desc = self._order
                result.sort(key=lambda r: r[column], reverse=desc)
            if self._limit is not None:
                result = result[: self._limit]
            return FakeResponse(result)

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in items:
                self.store.check_unique(self.table_name, item)
                row = {"id": self.store.next_id(), **item}
                rows.append(row)
                created.append(dict(row))
            return FakeResponse(created)

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        removed = [dict(r) for r in rows if self._matches(r)]
        rows[:] = [r for r in rows if not self._matches(r)]
        return FakeResponse(removed)


class FakeStore:
    """Dict-of-lists tables with unique name/auth_id columns, like the real schema."""

    UNIQUE = {"interests": "name", "clubs": "name", "users": "auth_id"}

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.failures: dict[tuple[str, str], Exception] = {}
        self.calls: list[tuple[str, str]] = []
        self.before_execute = None
        self._id = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def next_id(self) -> int:
        self._id += 1
        return self._id

    def seed(self, table: str, *rows: dict) -> list[dict]:
        created = []
        for row in rows:
            row = {"id": self.next_id(), **row}
            self.tables.setdefault(table, []).append(row)
            created.append(row)
        return created

    def check_unique(self, table: str, item: dict) -> None:
        column = self.UNIQUE.get(table)
        if column and any(r.get(column) == item.get(column) for r in self.tables.get(table, [])):
            raise APIError({
                "message": f'duplicate key value violates unique constraint "{table}_{column}_key"',
                "code": "23505",
                "hint": "",
                "details": "",
            })

    def fail(self, table: str, op: str, error: Exception | None = None) -> None:
        self.failures[(table, op)] = error or APIError({
            "message": "connection reset",
            "code": "PGRST000",
            "hint": "",
            "details": "",
        })

    def rows(self, table: str) -> list[dict]:
        return self.tables.get(table, [])

    def linked_names(self, user_id, kind: str) -> set[str]:
        """Names of the tags a user is linked to ("interest" or "club")."""
        tag_table, link_table, fk = {
            "interest": ("interests", "user_interests", "interest_id"),
            "club": ("clubs", "user_clubs", "club_id"),
        }[kind]
        names = {r["id"]: r["name"] for r in self.rows(tag_table)}
        return {names[r[fk]] for r in self.rows(link_table) if r["user_id"] == user_id}


class FakeUploader:
    """Asset host double: returns a URL per photo, or fails for chosen filenames."""

    def __init__(self, fail_on: tuple[str, ...] = ()):
        self.fail_on = set(fail_on)
        self.uploaded: list[str] = []

    async def upload(self, photo: PhotoAsset) -> str:
        if photo.filename in self.fail_on:
            raise UploadError(f"{photo.filename} rejected")
        url = f"https://res.cloudinary.com/demo/image/upload/{photo.filename}"
        self.uploaded.append(photo.filename)
        return url


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store():
    """Store seeded with reference data (inserted out of name order)."""
    store = FakeStore()
    store.seed("interests", {"name": "Running"}, {"name": "Hiking"}, {"name": "Chess"})
    store.seed("clubs", {"name": "Debate"}, {"name": "Chess Club"}, {"name": "A Cappella"})
    store.tables["campus_buildings"] = [
        {"id": 42, "name": "Nassau Hall", "latitude": 40.343, "longitude": -74.651},
        {"id": 7, "name": "Firestone Library", "latitude": 40.3496, "longitude": -74.6574},
        {"id": 13, "name": "Frist Campus Center", "latitude": 40.3467, "longitude": -74.6551},
    ]
    return store


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def user():
    return AuthenticatedUser(id="auth-user-1", email="alex@example.edu", access_token="token")


@pytest.fixture
def nassau_hall():
    return CampusBuilding(id=42, name="Nassau Hall", latitude=40.343, longitude=-74.651)


@pytest.fixture
def complete_draft(nassau_hall):
    """Draft that satisfies every step gate."""
    return ProfileDraft(
        name="Alex",
        class_year="2026",
        major="History",
        bio="Trail runner",
        photos=[PhotoAsset(content=b"\xff" * (2 * 1024 * 1024), filename="alex.jpg")],
        gender="female",
        gender_preference="everyone",
        vibe="roam",
        interests=["Hiking"],
        clubs=["Debate"],
        building=nassau_hall,
    )
