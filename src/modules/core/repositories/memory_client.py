"""In-memory implementation of the hosted backend interfaces.

Used for local development (``BACKEND_CLIENT=memory``) and by the test
suite.  Failures can be injected per operation through ``fail_on`` so the
error paths of the Service Layer can be exercised without a network.
"""

from __future__ import annotations

import copy
import uuid
from typing import Dict, List, Optional, Sequence

from django.utils import timezone

from modules.core.exceptions import StorageError
from modules.core.repositories.interfaces import (
    IBackendClient,
    IBlobBucket,
    IRowCollection,
    Row,
)


class InMemoryRowCollection(IRowCollection):
    """Dictionary-backed table keyed by ``id``."""

    def __init__(self, fail_on: Dict[str, str]) -> None:
        self.rows: Dict[str, Row] = {}
        self.fail_on = fail_on

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StorageError(self.fail_on[operation])

    async def insert(self, record: Row) -> None:
        self._check("insert")
        row = copy.deepcopy(record)
        row.setdefault("id", str(uuid.uuid4()))
        now = timezone.now().isoformat()
        row.setdefault("created_at", now)
        row.setdefault("updated_at", now)
        self.rows[str(row["id"])] = row

    async def update(self, id: str, record: Row) -> None:
        self._check("update")
        # PostgREST updates zero rows silently when the id is unknown
        row = self.rows.get(id)
        if row is None:
            return
        row.update(copy.deepcopy(record))
        row["updated_at"] = timezone.now().isoformat()

    async def select_by_id(self, id: str, columns: str = "*") -> Optional[Row]:
        self._check("select")
        row = self.rows.get(id)
        if row is None:
            return None
        if columns == "*":
            return copy.deepcopy(row)
        wanted = [c.strip() for c in columns.split(",")]
        return {c: copy.deepcopy(row.get(c)) for c in wanted}

    async def delete_by_id(self, id: str) -> None:
        self._check("delete")
        self.rows.pop(id, None)

    async def select_all(
        self, order_by: str = "created_at", descending: bool = True
    ) -> List[Row]:
        self._check("select")
        return sorted(
            (copy.deepcopy(row) for row in self.rows.values()),
            key=lambda row: str(row.get(order_by) or ""),
            reverse=descending,
        )


class InMemoryBlobBucket(IBlobBucket):
    """Dictionary-backed bucket keyed by object path."""

    def __init__(self, name: str, base_url: str, fail_on: Dict[str, str]) -> None:
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.objects: Dict[str, bytes] = {}
        self.fail_on = fail_on

    async def remove(self, paths: Sequence[str]) -> None:
        if "remove" in self.fail_on:
            raise StorageError(self.fail_on["remove"])
        for path in paths:
            self.objects.pop(path, None)

    async def upload(self, path: str, content: bytes, content_type: str) -> None:
        if "upload" in self.fail_on:
            raise StorageError(self.fail_on["upload"])
        if path in self.objects:
            raise StorageError("The resource already exists")
        self.objects[path] = content

    async def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.name}/{path}"


class InMemoryBackendClient(IBackendClient):
    """Backend client keeping tables, buckets and sessions in memory."""

    def __init__(self, base_url: str = "http://localhost:54321") -> None:
        self.base_url = base_url
        self.fail_on: Dict[str, str] = {}
        self.sessions: Dict[str, str] = {}
        self._tables: Dict[str, InMemoryRowCollection] = {}
        self._buckets: Dict[str, InMemoryBlobBucket] = {}

    def rows(self, table: str) -> InMemoryRowCollection:
        if table not in self._tables:
            self._tables[table] = InMemoryRowCollection(self.fail_on)
        return self._tables[table]

    def bucket(self, name: str) -> InMemoryBlobBucket:
        if name not in self._buckets:
            self._buckets[name] = InMemoryBlobBucket(name, self.base_url, self.fail_on)
        return self._buckets[name]

    async def get_user_id(self, access_token: str) -> Optional[str]:
        return self.sessions.get(access_token)

    def add_admin(self, access_token: str, user_id: Optional[str] = None) -> str:
        """Register a session whose profile carries the ``admin`` role."""
        user_id = user_id or str(uuid.uuid4())
        self.sessions[access_token] = user_id
        self.rows("profiles").rows[user_id] = {"id": user_id, "role": "admin"}
        return user_id
