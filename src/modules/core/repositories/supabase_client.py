"""Supabase implementation of the hosted backend interfaces.

Wraps the async ``supabase`` client.  PostgREST and Storage errors, as well
as transport (httpx) errors, are translated into ``StorageError`` so the
Service Layer only ever sees one exception type, whatever part of the
platform failed.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import httpx
import structlog
from supabase import (
    AsyncClient,
    AsyncClientOptions,
    AuthError,
    PostgrestAPIError,
    StorageException,
    acreate_client,
)

from modules.core.config import BackendConfig
from modules.core.exceptions import StorageError
from modules.core.repositories.interfaces import (
    IBackendClient,
    IBlobBucket,
    IRowCollection,
    Row,
)

logger = structlog.get_logger(__name__)


# Transport failures (connection refused, timeouts) surface as httpx errors.
_ROW_ERRORS = (PostgrestAPIError, httpx.HTTPError)
_BLOB_ERRORS = (StorageException, httpx.HTTPError)


def _error_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__


class SupabaseRowCollection(IRowCollection):
    """Row accessor backed by PostgREST."""

    def __init__(self, client: AsyncClient, table: str) -> None:
        self._client = client
        self._table = table

    async def insert(self, record: Row) -> None:
        try:
            await self._client.table(self._table).insert(record).execute()
        except _ROW_ERRORS as exc:
            raise StorageError(_error_message(exc)) from exc

    async def update(self, id: str, record: Row) -> None:
        try:
            await self._client.table(self._table).update(record).eq("id", id).execute()
        except _ROW_ERRORS as exc:
            raise StorageError(_error_message(exc)) from exc

    async def select_by_id(self, id: str, columns: str = "*") -> Optional[Row]:
        try:
            response = await (
                self._client.table(self._table)
                .select(columns)
                .eq("id", id)
                .maybe_single()
                .execute()
            )
        except _ROW_ERRORS as exc:
            raise StorageError(_error_message(exc)) from exc
        # maybe_single() yields no response at all when the row is missing
        if response is None:
            return None
        return response.data or None

    async def delete_by_id(self, id: str) -> None:
        try:
            await self._client.table(self._table).delete().eq("id", id).execute()
        except _ROW_ERRORS as exc:
            raise StorageError(_error_message(exc)) from exc

    async def select_all(
        self, order_by: str = "created_at", descending: bool = True
    ) -> List[Row]:
        try:
            response = await (
                self._client.table(self._table)
                .select("*")
                .order(order_by, desc=descending)
                .execute()
            )
        except _ROW_ERRORS as exc:
            raise StorageError(_error_message(exc)) from exc
        return list(response.data or [])


class SupabaseBlobBucket(IBlobBucket):
    """Blob accessor backed by Supabase Storage."""

    def __init__(self, client: AsyncClient, name: str) -> None:
        self._client = client
        self._name = name

    async def remove(self, paths: Sequence[str]) -> None:
        try:
            await self._client.storage.from_(self._name).remove(list(paths))
        except _BLOB_ERRORS as exc:
            raise StorageError(_error_message(exc)) from exc

    async def upload(self, path: str, content: bytes, content_type: str) -> None:
        try:
            await self._client.storage.from_(self._name).upload(
                path,
                content,
                {"content-type": content_type, "upsert": "false"},
            )
        except _BLOB_ERRORS as exc:
            raise StorageError(_error_message(exc)) from exc

    async def public_url(self, path: str) -> str:
        return await self._client.storage.from_(self._name).get_public_url(path)


class SupabaseBackendClient(IBackendClient):
    """Concrete backend client over an ``AsyncClient``."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    @classmethod
    async def connect(cls, config: BackendConfig) -> SupabaseBackendClient:
        """Build a server-side client using the service-role key.

        Sessions are neither persisted nor refreshed: the client lives for
        a single request.
        """
        client = await acreate_client(
            config.supabase_url,
            config.supabase_key,
            options=AsyncClientOptions(
                auto_refresh_token=False,
                persist_session=False,
            ),
        )
        return cls(client)

    def rows(self, table: str) -> IRowCollection:
        return SupabaseRowCollection(self._client, table)

    def bucket(self, name: str) -> IBlobBucket:
        return SupabaseBlobBucket(self._client, name)

    async def get_user_id(self, access_token: str) -> Optional[str]:
        if not access_token:
            return None
        try:
            response = await self._client.auth.get_user(access_token)
        except (AuthError, httpx.HTTPError) as exc:
            logger.warning("auth.user_lookup_failed", error=_error_message(exc))
            return None
        if response is None or response.user is None:
            return None
        return str(response.user.id)
