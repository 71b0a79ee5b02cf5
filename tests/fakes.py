# =============================================================================
# tests/fakes.py - In-Memory Supabase Client
# =============================================================================
# A small stand-in for the supabase-py client used by the services:
# - table() query builder with the filters the services use
# - rpc() with pluggable handlers
# - storage.from_() buckets that record every call
#
# Tables are plain lists of dicts, so tests seed rows directly and assert on
# what the API wrote.
# =============================================================================

from __future__ import annotations

import copy
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable


class FakeBackendFailure(Exception):
    """Raised by the fake when a table or RPC is set to fail."""


class FakeResponse:
    """Mimics postgrest's APIResponse (.data / .count)."""

    def __init__(self, data: Any, count: int | None = None):
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query against one in-memory table."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.operation = "select"
        self.payload: Any = None
        self.filters: list[Callable[[dict], bool]] = []
        self.orderings: list[tuple[str, bool]] = []
        self.row_limit: int | None = None
        self.count_mode: str | None = None

    # -- operations ----------------------------------------------------------

    def select(self, columns: str = "*", count: str | None = None) -> "FakeQuery":
        self.operation = "select"
        self.count_mode = count
        return self

    def insert(self, data: dict | list[dict]) -> "FakeQuery":
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, data: dict) -> "FakeQuery":
        self.operation = "update"
        self.payload = data
        return self

    def delete(self) -> "FakeQuery":
        self.operation = "delete"
        return self

    # -- filters -------------------------------------------------------------

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column: str, values: list) -> "FakeQuery":
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(
            lambda row: row.get(column) is not None and str(row[column]) >= str(value)
        )
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(
            lambda row: row.get(column) is not None and str(row[column]) <= str(value)
        )
        return self

    def or_(self, expression: str) -> "FakeQuery":
        """Supports comma-separated `column.eq.value` and `column.is.null` terms."""
        terms: list[Callable[[dict], bool]] = []
        for term in expression.split(","):
            column, op, value = term.split(".", 2)
            if op == "eq":
                terms.append(lambda row, c=column, v=value: row.get(c) is not None and str(row[c]) == v)
            elif op == "is" and value == "null":
                terms.append(lambda row, c=column: row.get(c) is None)
            else:
                raise NotImplementedError(f"or_ operator {op}.{value}")

        self.filters.append(lambda row: any(check(row) for check in terms))
        return self

    def order(self, column: str, desc: bool = False, nullsfirst: bool = False) -> "FakeQuery":
        # Postgres puts NULLs last ascending and first descending
        self.orderings.append((column, desc, nullsfirst or desc))
        return self

    def limit(self, size: int) -> "FakeQuery":
        self.row_limit = size
        return self

    # -- execution -----------------------------------------------------------

    def _matches(self, row: dict) -> bool:
        return all(check(row) for check in self.filters)

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.operation, self.table))
        if self.table in self.db.failing_tables:
            raise FakeBackendFailure(f"relation {self.table} is unavailable")

        rows = self.db.tables[self.table]

        if self.operation == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = [self.db.make_row(item) for item in items]
            rows.extend(created)
            return FakeResponse(copy.deepcopy(created))

        if self.operation == "update":
            touched = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self.payload))
                    touched.append(copy.deepcopy(row))
            return FakeResponse(touched)

        if self.operation == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(copy.deepcopy(removed))

        matched = [row for row in rows if self._matches(row)]
        # Apply orderings last-to-first so the first one is the primary key
        for column, desc, nulls_first in reversed(self.orderings):
            present = [row for row in matched if row.get(column) is not None]
            missing = [row for row in matched if row.get(column) is None]
            present.sort(key=lambda row: row[column], reverse=desc)
            matched = missing + present if nulls_first else present + missing

        total = len(matched)
        if self.row_limit is not None:
            matched = matched[: self.row_limit]

        count = total if self.count_mode else None
        return FakeResponse(copy.deepcopy(matched), count=count)


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db = db
        self.name = name
        self.params = params

    def execute(self) -> FakeResponse:
        self.db.calls.append(("rpc", self.name))
        handler = self.db.rpc_handlers.get(self.name)
        if handler is None:
            raise FakeBackendFailure(f"function {self.name} does not exist")
        return FakeResponse(handler(self.params))


# =============================================================================
# Storage
# =============================================================================

class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def _objects(self) -> dict[str, bytes]:
        if self.name not in self.storage.buckets:
            raise FakeBackendFailure(f"Bucket not found: {self.name}")
        return self.storage.buckets[self.name]

    def upload(self, path: str, file: bytes, file_options: dict | None = None) -> dict:
        self.storage.calls.append({
            "op": "upload",
            "bucket": self.name,
            "path": path,
            "options": dict(file_options or {}),
        })
        objects = self._objects()
        if path in objects and (file_options or {}).get("upsert") != "true":
            raise FakeBackendFailure(f"The resource already exists: {self.name}/{path}")
        objects[path] = file
        return {"path": path, "fullPath": f"{self.name}/{path}"}

    def create_signed_url(self, path: str, expires_in: int) -> dict:
        self.storage.calls.append({
            "op": "create_signed_url",
            "bucket": self.name,
            "path": path,
            "expires_in": expires_in,
        })
        if path not in self._objects():
            raise FakeBackendFailure(f"Object not found: {self.name}/{path}")
        url = f"{self.storage.base_url}/object/sign/{self.name}/{path}?token=signed"
        return {"signedURL": url, "signedUrl": url}

    def get_public_url(self, path: str) -> str:
        self.storage.calls.append({"op": "get_public_url", "bucket": self.name, "path": path})
        return f"{self.storage.base_url}/object/public/{self.name}/{path}"


class FakeStorage:
    """Buckets keyed by name, each a dict of path -> bytes."""

    def __init__(self, buckets: list[str] | None = None):
        self.base_url = "https://test-project.supabase.co/storage/v1"
        self.buckets: dict[str, dict[str, bytes]] = {name: {} for name in buckets or []}
        self.calls: list[dict] = []

    def from_(self, name: str) -> FakeBucket:
        return FakeBucket(self, name)

    def get_bucket(self, name: str) -> dict:
        self.calls.append({"op": "get_bucket", "bucket": name})
        if name not in self.buckets:
            raise FakeBackendFailure(f"Bucket not found: {name}")
        return {"id": name, "name": name}


# =============================================================================
# Client
# =============================================================================

class FakeSupabase:
    """In-memory replacement for supabase.Client."""

    def __init__(self, buckets: list[str] | None = None):
        self.tables: dict[str, list[dict]] = defaultdict(list)
        self.storage = FakeStorage(buckets)
        self.rpc_handlers: dict[str, Callable[[dict], Any]] = {}
        self.failing_tables: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict | None = None) -> FakeRpc:
        return FakeRpc(self, name, params or {})

    @staticmethod
    def make_row(item: dict) -> dict:
        row = copy.deepcopy(item)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        return row

    def seed(self, table: str, *rows: dict) -> list[dict]:
        """Insert rows directly, filling id/created_at. Returns copies."""
        created = [self.make_row(row) for row in rows]
        self.tables[table].extend(created)
        return copy.deepcopy(created)

    def rows(self, table: str, **match: Any) -> list[dict]:
        """Rows of a table, optionally filtered by column equality."""
        return [
            row for row in self.tables[table]
            if all(row.get(column) == value for column, value in match.items())
        ]
