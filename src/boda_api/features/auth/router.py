"""HTTP interface for authentication endpoints."""

from __future__ import annotations

import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, Security, status

from boda_api.app.dependencies import get_auth_service
from boda_api.common.time import utc_now
from boda_api.core.auth import AuthenticatedPrincipal
from boda_api.core.http import CurrentUser, get_current_principal, require_csrf
from boda_api.features.users.schemas import UserProfile
from boda_api.settings import Settings, get_settings

from .schemas import (
    AuthLoginRequest,
    AuthRegisterRequest,
    SessionEnvelope,
    SessionSnapshot,
    SessionStatusResponse,
)
from .schemas import SessionTokens as SessionTokensSchema
from .service import (
    AccountLockedError,
    AuthResult,
    AuthService,
    EmailAlreadyRegisteredError,
    InactiveUserError,
    InvalidCredentialsError,
    RegistrationClosedError,
    SessionTokens,
)

router = APIRouter(tags=["auth"])

SettingsDep = Annotated[Settings, Depends(get_settings)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


# ---- Helpers ----


def _auth_error(status_code: int, *, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error": code, "message": message})


def _serialize_tokens(tokens: SessionTokens) -> SessionTokensSchema:
    expires_in = max(0, int((tokens.access_expires_at - utc_now()).total_seconds()))
    return SessionTokensSchema(
        access_token=tokens.access_token,
        token_type="bearer",
        expires_at=tokens.access_expires_at,
        expires_in=expires_in,
    )


def _cookie_kwargs(settings: Settings, *, http_only: bool) -> dict[str, object]:
    kwargs: dict[str, object] = {
        "httponly": http_only,
        "secure": settings.server_public_url.lower().startswith("https://"),
        "samesite": "lax",
        "path": settings.session_cookie_path or "/",
    }
    if settings.session_cookie_domain:
        kwargs["domain"] = settings.session_cookie_domain
    return kwargs


def _set_session_cookies(
    response: Response,
    tokens: SessionTokens,
    settings: Settings,
    *,
    csrf_token: str,
) -> None:
    max_age = max(1, int((tokens.access_expires_at - utc_now()).total_seconds()))
    response.set_cookie(
        key=settings.session_cookie_name,
        value=tokens.access_token,
        max_age=max_age,
        expires=tokens.access_expires_at,
        **_cookie_kwargs(settings, http_only=True),
    )
    response.set_cookie(
        key=settings.session_csrf_cookie_name,
        value=csrf_token,
        max_age=max_age,
        expires=tokens.access_expires_at,
        **_cookie_kwargs(settings, http_only=False),
    )


def _clear_session_cookies(response: Response, settings: Settings) -> None:
    base_kwargs = {
        "path": settings.session_cookie_path or "/",
        "domain": settings.session_cookie_domain,
    }
    response.delete_cookie(settings.session_cookie_name, **base_kwargs)
    response.delete_cookie(settings.session_csrf_cookie_name, **base_kwargs)


def _issue_session_envelope(
    *,
    result: AuthResult,
    response: Response,
    settings: Settings,
) -> SessionEnvelope:
    csrf_token = secrets.token_urlsafe(32)
    _set_session_cookies(response, result.tokens, settings, csrf_token=csrf_token)
    return SessionEnvelope(
        session=_serialize_tokens(result.tokens),
        csrf_token=csrf_token,
        user=UserProfile.model_validate(result.user),
    )


# ---- Routes ----


@router.post(
    "/register",
    response_model=SessionEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create an organiser account and start a session",
    responses={
        status.HTTP_403_FORBIDDEN: {"description": "Registration is disabled."},
        status.HTTP_409_CONFLICT: {"description": "Email already registered."},
    },
)
async def register(
    payload: AuthRegisterRequest,
    response: Response,
    settings: SettingsDep,
    service: AuthServiceDep,
) -> SessionEnvelope:
    try:
        result = await service.register(
            email=str(payload.email),
            password=payload.password.get_secret_value(),
            display_name=payload.display_name,
        )
    except RegistrationClosedError as exc:
        raise _auth_error(
            status.HTTP_403_FORBIDDEN,
            code="registration_closed",
            message=str(exc),
        ) from exc
    except EmailAlreadyRegisteredError as exc:
        raise _auth_error(
            status.HTTP_409_CONFLICT,
            code="email_taken",
            message=str(exc),
        ) from exc

    return _issue_session_envelope(result=result, response=response, settings=settings)


@router.post(
    "/login",
    response_model=SessionEnvelope,
    status_code=status.HTTP_200_OK,
    summary="Create a session via email/password",
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Invalid credentials."},
        status.HTTP_403_FORBIDDEN: {"description": "Account is inactive."},
        status.HTTP_423_LOCKED: {"description": "Too many failed attempts."},
    },
)
async def login(
    payload: AuthLoginRequest,
    response: Response,
    settings: SettingsDep,
    service: AuthServiceDep,
) -> SessionEnvelope:
    try:
        result = await service.login_with_password(
            email=str(payload.email),
            password=payload.password.get_secret_value(),
        )
    except InvalidCredentialsError as exc:
        raise _auth_error(
            status.HTTP_401_UNAUTHORIZED,
            code="invalid_credentials",
            message=str(exc),
        ) from exc
    except InactiveUserError as exc:
        raise _auth_error(
            status.HTTP_403_FORBIDDEN,
            code="inactive_user",
            message=str(exc),
        ) from exc
    except AccountLockedError as exc:
        raise _auth_error(
            status.HTTP_423_LOCKED,
            code="account_locked",
            message=str(exc),
        ) from exc

    return _issue_session_envelope(result=result, response=response, settings=settings)


@router.get(
    "/session",
    response_model=SessionStatusResponse,
    status_code=status.HTTP_200_OK,
    summary="Return the current session snapshot",
)
async def read_session(
    principal: Annotated[AuthenticatedPrincipal, Depends(get_current_principal)],
    user: CurrentUser,
) -> SessionStatusResponse:
    snapshot = SessionSnapshot(
        user_id=principal.user_id,
        auth_via=principal.auth_via.value,
        expires_at=principal.expires_at,
    )
    return SessionStatusResponse(session=snapshot, user=UserProfile.model_validate(user))


@router.post(
    "/logout",
    dependencies=[Security(require_csrf)],
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Terminate the current browser session",
)
async def logout(settings: SettingsDep) -> Response:
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    _clear_session_cookies(response, settings)
    return response
