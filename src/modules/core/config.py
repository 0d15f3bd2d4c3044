"""Explicit hosted-backend configuration.

Settings are read from the environment exactly once, in
``config.settings``.  This module packs the relevant values into an
immutable ``BackendConfig`` and builds a backend client from it, so the
core never reaches into ``os.environ`` on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from modules.core.repositories.interfaces import IBackendClient
from modules.core.repositories.memory_client import InMemoryBackendClient

SUPPORTED_BACKENDS = ("supabase", "memory")

_memory_client: Optional[InMemoryBackendClient] = None


@dataclass(frozen=True)
class BackendConfig:
    backend: str
    supabase_url: str
    supabase_key: str

    @classmethod
    def from_settings(cls) -> BackendConfig:
        return cls(
            backend=settings.BACKEND_CLIENT,
            supabase_url=settings.SUPABASE_URL,
            supabase_key=settings.SUPABASE_SERVICE_ROLE_KEY,
        )


def get_memory_client() -> InMemoryBackendClient:
    """Process-wide in-memory backend (development and tests only)."""
    global _memory_client
    if _memory_client is None:
        _memory_client = InMemoryBackendClient()
    return _memory_client


def reset_memory_client() -> None:
    global _memory_client
    _memory_client = None


async def create_backend_client(config: BackendConfig) -> IBackendClient:
    """Build the backend client selected by ``config.backend``.

    Raises:
        ImproperlyConfigured: unknown backend or missing Supabase credentials.
    """
    if config.backend == "memory":
        return get_memory_client()
    if config.backend == "supabase":
        if not config.supabase_url or not config.supabase_key:
            raise ImproperlyConfigured(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set."
            )
        from modules.core.repositories.supabase_client import SupabaseBackendClient

        return await SupabaseBackendClient.connect(config)
    raise ImproperlyConfigured(
        f"BACKEND_CLIENT must be one of: {', '.join(SUPPORTED_BACKENDS)}."
    )
