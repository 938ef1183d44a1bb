"""Exception handlers that translate auth errors to HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse

from ..auth.errors import AuthenticationError


def _handle_authentication_error(_request, exc: AuthenticationError) -> JSONResponse:
    """Translate auth failures into HTTP 401 responses."""

    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc) or "Authentication required"},
        headers={"WWW-Authenticate": "Bearer"},
    )


def register_auth_exception_handlers(app: FastAPI) -> None:
    """Attach auth handlers to the FastAPI app."""

    app.add_exception_handler(AuthenticationError, _handle_authentication_error)
