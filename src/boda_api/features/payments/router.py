"""Routes for payment configuration and provider webhooks."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Header, Path, Query, Security, status

from boda_api.app.dependencies import get_payment_config_service, get_webhook_service
from boda_api.core.http import CurrentUser, require_authenticated, require_csrf

from .config_service import PaymentConfigService
from .schemas import (
    PaymentConfigOut,
    PaymentConfigUpdate,
    WebhookAck,
    WebhookNotification,
    WebhookNotificationData,
)
from .webhooks import PaymentWebhookService

config_router = APIRouter(tags=["payments"], dependencies=[Security(require_authenticated)])
webhook_router = APIRouter(tags=["payments"])

PaymentConfigServiceDep = Annotated[PaymentConfigService, Depends(get_payment_config_service)]
WebhookServiceDep = Annotated[PaymentWebhookService, Depends(get_webhook_service)]
WeddingPath = Annotated[UUID, Path(description="Wedding identifier")]


@config_router.get(
    "/weddings/{wedding_id}/payment-config",
    response_model=PaymentConfigOut,
    status_code=status.HTTP_200_OK,
    summary="Read the wedding's payment settings",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Wedding not found."}},
)
async def read_payment_config(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: PaymentConfigServiceDep,
) -> PaymentConfigOut:
    return await service.get_config(owner=user, wedding_id=wedding_id)


@config_router.put(
    "/weddings/{wedding_id}/payment-config",
    dependencies=[Security(require_csrf)],
    response_model=PaymentConfigOut,
    status_code=status.HTTP_200_OK,
    summary="Update the wedding's payment settings",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Wedding not found."}},
)
async def update_payment_config(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: PaymentConfigServiceDep,
    payload: PaymentConfigUpdate = Body(...),
) -> PaymentConfigOut:
    return await service.update_config(owner=user, wedding_id=wedding_id, payload=payload)


@webhook_router.post(
    "/payments/webhooks/mercadopago/{wedding_id}",
    response_model=WebhookAck,
    status_code=status.HTTP_200_OK,
    summary="Receive Mercado Pago payment notifications",
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Signature missing or invalid."},
        status.HTTP_502_BAD_GATEWAY: {"description": "Provider lookup failed; retry later."},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "Webhook secret not configured."},
    },
)
async def mercadopago_webhook(
    wedding_id: WeddingPath,
    service: WebhookServiceDep,
    notification: Annotated[WebhookNotification | None, Body()] = None,
    x_signature: Annotated[str | None, Header(alias="x-signature")] = None,
    x_request_id: Annotated[str | None, Header(alias="x-request-id")] = None,
    query_data_id: Annotated[str | None, Query(alias="data.id")] = None,
    query_type: Annotated[str | None, Query(alias="type")] = None,
    query_topic: Annotated[str | None, Query(alias="topic")] = None,
    query_id: Annotated[str | None, Query(alias="id")] = None,
) -> WebhookAck:
    if notification is None:
        # Legacy IPN deliveries carry everything in the query string.
        notification = WebhookNotification(
            type=query_type,
            topic=query_topic,
            data=WebhookNotificationData(id=query_data_id or query_id),
        )
    return await service.handle_mercadopago(
        wedding_id=wedding_id,
        notification=notification,
        signature=x_signature,
        request_id=x_request_id,
        data_id=query_data_id,
    )
