"""Hosted backend capability interfaces (Dependency Inversion Principle).

The admin core never talks to a concrete Supabase client.  Service-layer
code depends on the narrow shapes declared here:

- ``IRowCollection``: row-oriented access to one table.
- ``IBlobBucket``: object storage for one bucket.
- ``IBackendClient``: entry point handing out the two above plus the
  auth look-up used by the admin guard.

Every collaborator failure is raised as ``StorageError``; "no such row"
is not a failure and is reported as ``None``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

Row = Dict[str, Any]


class IRowCollection(ABC):
    """Row accessor for a single table."""

    @abstractmethod
    async def insert(self, record: Row) -> None:
        """Insert a new row."""

    @abstractmethod
    async def update(self, id: str, record: Row) -> None:
        """Update the row whose ``id`` matches."""

    @abstractmethod
    async def select_by_id(self, id: str, columns: str = "*") -> Optional[Row]:
        """Return the row whose ``id`` matches, or ``None``."""

    @abstractmethod
    async def delete_by_id(self, id: str) -> None:
        """Delete the row whose ``id`` matches."""

    @abstractmethod
    async def select_all(
        self, order_by: str = "created_at", descending: bool = True
    ) -> List[Row]:
        """Return every row, ordered by ``order_by``."""


class IBlobBucket(ABC):
    """Object storage accessor for a single bucket."""

    @abstractmethod
    async def remove(self, paths: Sequence[str]) -> None:
        """Remove the objects stored under ``paths``."""

    @abstractmethod
    async def upload(self, path: str, content: bytes, content_type: str) -> None:
        """Store ``content`` under ``path`` (never overwrites)."""

    @abstractmethod
    async def public_url(self, path: str) -> str:
        """Public URL of the object stored under ``path``."""


class IBackendClient(ABC):
    """Capability surface of the hosted database/auth/storage service."""

    @abstractmethod
    def rows(self, table: str) -> IRowCollection:
        """Row accessor for ``table``."""

    @abstractmethod
    def bucket(self, name: str) -> IBlobBucket:
        """Blob accessor for bucket ``name``."""

    @abstractmethod
    async def get_user_id(self, access_token: str) -> Optional[str]:
        """Resolve an access token to a user id (``None`` if invalid)."""
