"""Request authentication pipeline used by FastAPI dependencies."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID

import jwt
from fastapi import Request

from boda_api.core.security.tokens import ACCESS_TOKEN_TYPE, decode_token
from boda_api.settings import Settings

from .errors import AuthenticationError
from .principal import AuthenticatedPrincipal, AuthVia


def extract_bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


def extract_cookie_token(request: Request, settings: Settings) -> str | None:
    return (request.cookies.get(settings.session_cookie_name) or "").strip() or None


def principal_from_access_token(
    token: str,
    *,
    settings: Settings,
    auth_via: AuthVia,
) -> AuthenticatedPrincipal:
    """Validate a signed access token and return the principal it names."""

    try:
        payload = decode_token(
            token,
            secret=settings.jwt_secret_value,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.PyJWTError as exc:
        raise AuthenticationError("Invalid or expired access token.") from exc

    if str(payload.get("typ") or "").lower() != ACCESS_TOKEN_TYPE:
        raise AuthenticationError("Access token required.")

    try:
        user_id = UUID(str(payload.get("sub") or ""))
    except ValueError as exc:
        raise AuthenticationError("Access token subject is invalid.") from exc

    exp = payload.get("exp")
    expires_at = datetime.fromtimestamp(int(exp), tz=UTC) if exp is not None else None
    return AuthenticatedPrincipal(user_id=user_id, auth_via=auth_via, expires_at=expires_at)


def authenticate_request(request: Request, settings: Settings) -> AuthenticatedPrincipal:
    """Authenticate an incoming request to a principal.

    A bearer header wins over the session cookie so API clients are never
    subject to the browser CSRF guard.
    """

    bearer = extract_bearer_token(request)
    if bearer:
        return principal_from_access_token(bearer, settings=settings, auth_via=AuthVia.BEARER)

    cookie = extract_cookie_token(request, settings)
    if cookie:
        return principal_from_access_token(cookie, settings=settings, auth_via=AuthVia.COOKIE)

    raise AuthenticationError("Authentication required")
