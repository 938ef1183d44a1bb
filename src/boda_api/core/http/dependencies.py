"""FastAPI dependencies that bridge HTTP requests to the auth foundation."""

from __future__ import annotations

import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.db import get_db_session
from boda_api.models import User
from boda_api.settings import Settings, get_settings

from ..auth import AuthenticatedPrincipal, AuthenticationError, authenticate_request

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


async def get_current_principal(
    request: Request,
    settings: SettingsDep,
) -> AuthenticatedPrincipal:
    """Authenticate the incoming request and return the current principal."""

    return authenticate_request(request, settings)


async def require_authenticated(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
    db: SessionDep,
) -> User:
    """Ensure the request is authenticated and return the persisted user."""

    user = await db.get(User, principal.user_id)
    if user is None:
        raise AuthenticationError("Unknown principal")
    if not user.is_active:
        raise AuthenticationError("User account is inactive.")
    return user


CurrentUser = Annotated[User, Depends(require_authenticated)]

_SAFE_METHODS = {"GET", "HEAD", "OPTIONS", "TRACE"}


async def require_csrf(
    request: Request,
    settings: SettingsDep,
    csrf_token: Annotated[str | None, Header(alias="X-CSRF-Token")] = None,
) -> None:
    """Enforce double-submit CSRF protection for cookie-authenticated requests.

    CSRF is required when the browser automatically attaches the session cookie.
    Requests authenticated via bearer tokens skip this guard.
    """

    if request.method.upper() in _SAFE_METHODS:
        return

    auth_header = request.headers.get("authorization") or ""
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return

    session_cookie = (request.cookies.get(settings.session_cookie_name) or "").strip()
    if not session_cookie:
        return

    cookie_csrf = (request.cookies.get(settings.session_csrf_cookie_name) or "").strip()
    header_csrf = (csrf_token or "").strip()

    if not cookie_csrf or not header_csrf or not secrets.compare_digest(cookie_csrf, header_csrf):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "csrf_failed",
                "message": "CSRF token missing or invalid.",
            },
        )


__all__ = [
    "CurrentUser",
    "SessionDep",
    "SettingsDep",
    "get_current_principal",
    "require_authenticated",
    "require_csrf",
]
