"""Processing of payment provider notifications."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.common.logging import log_context
from boda_api.common.time import utc_now
from boda_api.features.contributions.repository import ContributionsRepository
from boda_api.features.contributions.service import payment_provider_error, payments_not_configured
from boda_api.features.contributions.transitions import TransitionOutcome, apply_status
from boda_api.models import ContributionStatus, PaymentEvent, PaymentProvider, Wedding
from boda_api.settings import Settings

from .config_service import resolve_credentials
from .gateway import PaymentGateway, PaymentGatewayError
from .schemas import WebhookAck, WebhookNotification
from .signatures import verify_signature

logger = logging.getLogger(__name__)

_PROVIDER = PaymentProvider.MERCADOPAGO.value
_PAYMENT_TOPIC = "payment"
_CLAIMED = "processing"


def event_id_for(notification: WebhookNotification, *, topic: str, data_id: str | None) -> str:
    """Notification id, or ``<type>:<data.id>:<action>`` when the provider omits it."""

    if notification.id:
        return notification.id
    return f"{topic}:{data_id or ''}:{notification.action or ''}"


def _parse_reference(reference: str | None) -> UUID | None:
    if not reference:
        return None
    try:
        return UUID(reference)
    except ValueError:
        return None


class PaymentWebhookService:
    """Verify, de-duplicate and apply Mercado Pago payment notifications."""

    def __init__(
        self,
        *,
        session: AsyncSession,
        settings: Settings,
        gateway: PaymentGateway,
    ) -> None:
        self._session = session
        self._settings = settings
        self._gateway = gateway

    async def handle_mercadopago(
        self,
        *,
        wedding_id: UUID,
        notification: WebhookNotification,
        signature: str | None,
        request_id: str | None,
        data_id: str | None = None,
    ) -> WebhookAck:
        secret = self._settings.mercadopago_webhook_secret_value
        if not secret:
            logger.error(
                "payments.webhook.secret_missing",
                extra=log_context(wedding_id=str(wedding_id)),
            )
            raise HTTPException(
                status.HTTP_503_SERVICE_UNAVAILABLE,
                detail={
                    "error": "webhook_not_configured",
                    "message": "Webhook secret is not configured.",
                },
            )

        data_id = data_id or notification.data.id
        if not verify_signature(
            secret=secret, header=signature, data_id=data_id, request_id=request_id
        ):
            logger.warning(
                "payments.webhook.invalid_signature",
                extra=log_context(wedding_id=str(wedding_id)),
            )
            raise HTTPException(
                status.HTTP_401_UNAUTHORIZED,
                detail={"error": "invalid_signature", "message": "Invalid webhook signature."},
            )

        topic = (notification.type or notification.topic or "").strip().lower()
        if topic != _PAYMENT_TOPIC:
            logger.info(
                "payments.webhook.ignored_topic",
                extra=log_context(wedding_id=str(wedding_id), topic=topic or None),
            )
            return WebhookAck(status="ignored")

        event_id = event_id_for(notification, topic=topic, data_id=data_id)
        if await self._already_recorded(event_id):
            return self._duplicate(event_id, wedding_id)

        wedding = await self._session.get(Wedding, wedding_id)
        event = PaymentEvent(
            provider=_PROVIDER,
            event_id=event_id,
            topic=topic,
            resource_id=data_id,
            wedding_id=wedding.id if wedding is not None else None,
            outcome=_CLAIMED,
            received_at=utc_now(),
        )
        if not await self._claim(event):
            return self._duplicate(event_id, wedding_id)

        outcome = await self._process(wedding, event, data_id)
        event.outcome = outcome
        event.processed_at = utc_now()
        await self._session.flush()

        logger.info(
            "payments.webhook.processed",
            extra=log_context(
                wedding_id=str(wedding_id),
                contribution_id=str(event.contribution_id) if event.contribution_id else None,
                event_id=event_id,
                outcome=outcome,
            ),
        )
        return WebhookAck(status=outcome, event_id=event_id)

    async def _process(
        self, wedding: Wedding | None, event: PaymentEvent, data_id: str | None
    ) -> str:
        if wedding is None or not data_id:
            return "unmatched"

        credentials = await resolve_credentials(self._session, wedding, self._settings)
        if credentials is None:
            raise payments_not_configured()

        try:
            payment = await self._gateway.get_payment(
                access_token=credentials.access_token,
                payment_id=data_id,
            )
        except PaymentGatewayError as exc:
            logger.warning(
                "payments.webhook.provider_error",
                extra=log_context(wedding_id=str(wedding.id), payment_id=data_id),
            )
            raise payment_provider_error(exc) from exc

        contribution_id = _parse_reference(payment.reference)
        contribution = (
            await ContributionsRepository(self._session).get_for_wedding(
                wedding.id, contribution_id
            )
            if contribution_id is not None
            else None
        )
        if contribution is None:
            logger.warning(
                "payments.webhook.unmatched",
                extra=log_context(wedding_id=str(wedding.id), payment_id=payment.payment_id),
            )
            return "unmatched"

        event.contribution_id = contribution.id
        previous = contribution.status
        result = apply_status(
            contribution,
            payment.status,
            now=utc_now(),
            status_detail=payment.status_detail,
            payment_id=payment.payment_id,
            paid_at=payment.approved_at,
        )
        if result is TransitionOutcome.IGNORED:
            logger.warning(
                "payments.webhook.transition_ignored",
                extra=log_context(
                    wedding_id=str(wedding.id),
                    contribution_id=str(contribution.id),
                    current=ContributionStatus(previous).value,
                    requested=payment.status.value,
                ),
            )
        return result.value

    async def _already_recorded(self, event_id: str) -> bool:
        stmt = select(PaymentEvent.id).where(
            PaymentEvent.provider == _PROVIDER,
            PaymentEvent.event_id == event_id,
        )
        result = await self._session.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def _claim(self, event: PaymentEvent) -> bool:
        """Insert the ledger row; ``False`` when a concurrent delivery won."""

        self._session.add(event)
        try:
            await self._session.flush()
        except IntegrityError:
            # Nothing else has been written in this transaction yet.
            await self._session.rollback()
            return False
        return True

    @staticmethod
    def _duplicate(event_id: str, wedding_id: UUID) -> WebhookAck:
        logger.info(
            "payments.webhook.duplicate",
            extra=log_context(wedding_id=str(wedding_id), event_id=event_id),
        )
        return WebhookAck(status="duplicate", event_id=event_id)


__all__ = ["PaymentWebhookService", "event_id_for"]
