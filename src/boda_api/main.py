"""Boda FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException

from .app.lifecycles import create_application_lifespan
from .common.exceptions import http_exception_handler, unhandled_exception_handler
from .common.logging import setup_logging
from .common.middleware import register_middleware
from .core.http import register_auth_exception_handlers
from .features.payments.gateway import PaymentGateway
from .routers import api_router
from .settings import Settings, get_settings

API_PREFIX = "/api"


def create_app(
    settings: Settings | None = None,
    *,
    payment_gateway: PaymentGateway | None = None,
) -> FastAPI:
    """Return a configured FastAPI application."""

    settings = settings or get_settings()
    setup_logging(settings)

    docs_url = settings.docs_url if settings.api_docs_enabled else None
    redoc_url = settings.redoc_url if settings.api_docs_enabled else None
    openapi_url = settings.openapi_url if settings.api_docs_enabled else None

    lifespan = create_application_lifespan(
        settings=settings,
        payment_gateway=payment_gateway,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_middleware(app, settings)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    register_auth_exception_handlers(app)
    app.include_router(api_router, prefix=API_PREFIX)
    return app


__all__ = [
    "API_PREFIX",
    "create_app",
]

app = create_app()
