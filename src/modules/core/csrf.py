"""Double-submit cookie CSRF protection for the admin area.

The token is stored in an HTTP-only cookie scoped to ``/admin`` and echoed
in a hidden form field.  A submission is trusted only when both values are
identical.  There is no server-side token store: the cookie is the only
state, and issuing a new token invalidates every form rendered before it.
"""

from __future__ import annotations

import uuid
from typing import Mapping, Optional, Protocol

CSRF_COOKIE = "csrf_token"
CSRF_FIELD = "csrf_token"
CSRF_COOKIE_PATH = "/admin"
CSRF_COOKIE_MAX_AGE = 60 * 60  # 1 hour


class CookieWriter(Protocol):
    """Anything exposing Django's ``HttpResponse.set_cookie`` signature."""

    def set_cookie(
        self,
        key: str,
        value: str = "",
        max_age: Optional[int] = None,
        expires=None,
        path: str = "/",
        domain: Optional[str] = None,
        secure: bool = False,
        httponly: bool = False,
        samesite: Optional[str] = None,
    ) -> None: ...


def generate_csrf_token() -> str:
    """Return a fresh random token (UUID4, 122 bits from the OS CSPRNG)."""
    return str(uuid.uuid4())


def set_csrf_cookie(response: CookieWriter, token: str, *, secure: bool) -> None:
    """Write ``token`` into the admin-scoped CSRF cookie."""
    response.set_cookie(
        CSRF_COOKIE,
        token,
        max_age=CSRF_COOKIE_MAX_AGE,
        path=CSRF_COOKIE_PATH,
        secure=secure,
        httponly=True,
        samesite="Strict",
    )


def read_csrf_cookie(cookies: Mapping[str, str]) -> str:
    """Read the token sent by the browser (before any overwrite)."""
    return cookies.get(CSRF_COOKIE) or ""


def validate_csrf_tokens(cookie_token: str, form_token: str) -> bool:
    """Timing-safe comparison of the cookie token and the submitted token.

    Every position is XOR-ed and OR-ed into a single accumulator, so the
    running time does not depend on where the first mismatch occurs.
    """
    if not cookie_token or not form_token:
        return False
    if len(cookie_token) != len(form_token):
        return False
    diff = 0
    for a, b in zip(cookie_token, form_token):
        diff |= ord(a) ^ ord(b)
    return diff == 0
