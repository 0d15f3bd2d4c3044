"""Admin access guard backed by the hosted auth service.

Session validation is delegated entirely to the backend: the access token
cookie is handed to ``IBackendClient.get_user_id`` and the user's
``profiles`` row must carry ``role == "admin"``.

Security decisions
------------------
* **Fail Closed**: a missing cookie, an unknown token, a missing profile or
  any backend error redirects to the login page.
* The guard builds the request's backend client once and exposes it as
  ``request.backend`` so views reuse the same connection.
"""

from __future__ import annotations

from functools import wraps
from typing import Awaitable, Callable

import structlog
from django.conf import settings
from django.http import HttpRequest, HttpResponse, HttpResponseRedirect

from modules.core.config import BackendConfig, create_backend_client
from modules.core.exceptions import StorageError

logger = structlog.get_logger(__name__)

AsyncView = Callable[..., Awaitable[HttpResponse]]

ADMIN_ROLE = "admin"


def admin_required(view: AsyncView) -> AsyncView:
    """Decorator for async admin views."""

    @wraps(view)
    async def wrapper(request: HttpRequest, *args, **kwargs) -> HttpResponse:
        backend = await create_backend_client(BackendConfig.from_settings())
        access_token = request.COOKIES.get(settings.ADMIN_ACCESS_TOKEN_COOKIE, "")

        user_id = await backend.get_user_id(access_token)
        if not user_id:
            logger.info("admin.unauthenticated", path=request.path)
            return HttpResponseRedirect(settings.ADMIN_LOGIN_URL)

        try:
            profile = await backend.rows("profiles").select_by_id(user_id)
        except StorageError as exc:
            logger.warning("admin.profile_lookup_failed", user_id=user_id, error=exc.message)
            return HttpResponseRedirect(settings.ADMIN_LOGIN_URL)

        if not profile or profile.get("role") != ADMIN_ROLE:
            logger.warning("admin.forbidden", user_id=user_id)
            return HttpResponseRedirect(settings.ADMIN_LOGIN_URL)

        request.backend = backend
        request.admin_user_id = user_id
        return await view(request, *args, **kwargs)

    return wrapper
