"""Service factories used by API routers.

This module is the single place routers import per-request service
constructors from.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from boda_api.core.http import SessionDep, SettingsDep
from boda_api.features.payments.gateway import PaymentGateway


def get_payment_gateway(request: Request) -> PaymentGateway:
    """Return the process-wide payment gateway created by the lifespan."""

    gateway = getattr(request.app.state, "payment_gateway", None)
    if gateway is None:
        raise RuntimeError("Payment gateway not initialized; is the lifespan running?")
    return gateway


PaymentGatewayDep = Annotated[PaymentGateway, Depends(get_payment_gateway)]


def get_auth_service(session: SessionDep, settings: SettingsDep):
    from boda_api.features.auth.service import AuthService

    return AuthService(session=session, settings=settings)


def get_users_service(session: SessionDep):
    from boda_api.features.users.service import UsersService

    return UsersService(session=session)


def get_weddings_service(session: SessionDep, settings: SettingsDep):
    from boda_api.features.weddings.service import WeddingsService

    return WeddingsService(session=session, settings=settings)


def get_guests_service(session: SessionDep, settings: SettingsDep):
    from boda_api.features.guests.service import GuestsService

    return GuestsService(session=session, settings=settings)


def get_contributions_service(
    session: SessionDep,
    settings: SettingsDep,
    gateway: PaymentGatewayDep,
):
    from boda_api.features.contributions.service import ContributionsService

    return ContributionsService(session=session, settings=settings, gateway=gateway)


def get_payment_config_service(session: SessionDep, settings: SettingsDep):
    from boda_api.features.payments.config_service import PaymentConfigService

    return PaymentConfigService(session=session, settings=settings)


def get_webhook_service(
    session: SessionDep,
    settings: SettingsDep,
    gateway: PaymentGatewayDep,
):
    from boda_api.features.payments.webhooks import PaymentWebhookService

    return PaymentWebhookService(session=session, settings=settings, gateway=gateway)


def get_public_service(session: SessionDep, settings: SettingsDep):
    from boda_api.features.public.service import PublicWeddingService

    return PublicWeddingService(session=session, settings=settings)


__all__ = [
    "PaymentGatewayDep",
    "get_auth_service",
    "get_contributions_service",
    "get_guests_service",
    "get_payment_config_service",
    "get_payment_gateway",
    "get_public_service",
    "get_users_service",
    "get_webhook_service",
    "get_weddings_service",
]
