"""FastAPI lifespan helpers for the Boda application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.routing import Lifespan
from sqlalchemy.engine import make_url

from boda_api.db import DatabaseConfig, db, schema_is_current
from boda_api.features.payments.gateway import MercadoPagoGateway, PaymentGateway
from boda_api.settings import Settings

logger = logging.getLogger(__name__)


def create_application_lifespan(
    *,
    settings: Settings,
    payment_gateway: PaymentGateway | None = None,
) -> Lifespan[FastAPI]:
    """Return the FastAPI lifespan handler used by the app factory.

    ``payment_gateway`` replaces the Mercado Pago client (tests, local demos);
    a gateway passed in is not closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.settings = settings
        if not settings.database_url:
            raise RuntimeError("Database settings are required (set BODA_DATABASE_URL).")
        safe_url = make_url(settings.database_url).render_as_string(hide_password=True)

        logger.info("db.init.start", extra={"database_url": safe_url})
        db.init(DatabaseConfig.from_settings(settings))
        logger.info("db.init.complete", extra={"database_url": safe_url})

        if settings.jwt_secret_generated:
            logger.warning(
                "auth.secret.generated",
                extra={"detail": "BODA_JWT_SECRET not set; sessions reset on restart"},
            )

        owns_gateway = payment_gateway is None
        gateway: PaymentGateway | None = None
        try:
            # Fail fast if the schema hasn't been migrated.
            if not await schema_is_current():
                logger.error("db.schema.missing", extra={"database_url": safe_url})
                raise RuntimeError(
                    "Database schema is not initialized. "
                    "Run `boda migrate` before starting the API."
                )

            gateway = payment_gateway or MercadoPagoGateway.from_settings(settings)
            app.state.payment_gateway = gateway
            if not settings.mercadopago_webhook_secret_value:
                logger.warning(
                    "payments.webhook.secret_missing",
                    extra={"detail": "BODA_MERCADOPAGO_WEBHOOK_SECRET not set; webhooks rejected"},
                )
            yield
        finally:
            if gateway is not None and owns_gateway:
                await gateway.aclose()
            app.state.payment_gateway = None
            await db.dispose()

    return lifespan


__all__ = ["create_application_lifespan"]
