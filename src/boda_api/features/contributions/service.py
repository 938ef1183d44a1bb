"""Business logic for contributions (gifts) and their checkout."""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.common.logging import log_context
from boda_api.common.pagination import paginate_sql
from boda_api.features.payments.config_service import resolve_credentials, webhook_url_for
from boda_api.features.payments.gateway import CheckoutRequest, PaymentGateway, PaymentGatewayError
from boda_api.features.weddings.service import load_owned_wedding, public_url_for
from boda_api.i18n import translate
from boda_api.models import Contribution, ContributionStatus, PaymentProvider, User, Wedding
from boda_api.settings import Settings

from .repository import ContributionsRepository
from .schemas import ContributionCheckout, ContributionCreate, ContributionOut, ContributionPage

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def payments_not_configured() -> HTTPException:
    return HTTPException(
        status.HTTP_409_CONFLICT,
        detail={
            "error": "payments_not_configured",
            "message": "This wedding is not accepting contributions.",
        },
    )


def payment_provider_error(exc: PaymentGatewayError) -> HTTPException:
    return HTTPException(
        status.HTTP_502_BAD_GATEWAY,
        detail={"error": "payment_provider_error", "message": str(exc)},
    )


class ContributionsService:
    """Owner listings plus the public checkout flow."""

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
        self._repo = ContributionsRepository(session)

    # ---- Owner queries ----

    async def list_contributions(
        self,
        *,
        owner: User,
        wedding_id: UUID,
        page: int,
        page_size: int,
        include_total: bool = False,
        status_filter: ContributionStatus | None = None,
    ) -> ContributionPage:
        wedding = await load_owned_wedding(self._session, wedding_id=wedding_id, owner_id=owner.id)
        stmt = self._repo.list_statement(
            wedding.id,
            status=ContributionStatus(status_filter) if status_filter else None,
        )
        result = await paginate_sql(
            self._session,
            stmt,
            page=page,
            page_size=page_size,
            order_by=(Contribution.created_at.desc(), Contribution.id.desc()),
            include_total=include_total,
        )
        return ContributionPage(
            items=[ContributionOut.model_validate(item) for item in result.items],
            page=result.page,
            page_size=result.page_size,
            has_next=result.has_next,
            has_previous=result.has_previous,
            total=result.total,
        )

    async def get_contribution(
        self, *, owner: User, wedding_id: UUID, contribution_id: UUID
    ) -> ContributionOut:
        wedding = await load_owned_wedding(self._session, wedding_id=wedding_id, owner_id=owner.id)
        contribution = await self._repo.get_for_wedding(wedding.id, contribution_id)
        if contribution is None:
            raise HTTPException(
                status.HTTP_404_NOT_FOUND,
                detail=f"Contribution {contribution_id} not found",
            )
        return ContributionOut.model_validate(contribution)

    # ---- Public checkout ----

    async def start_checkout(
        self,
        *,
        wedding: Wedding,
        payload: ContributionCreate,
        locale: str,
    ) -> ContributionCheckout:
        """Create a pending contribution and the provider checkout for it.

        The caller is responsible for only passing published weddings.
        """

        credentials = await resolve_credentials(self._session, wedding, self._settings)
        if credentials is None:
            logger.warning(
                "contribution.checkout.not_configured",
                extra=log_context(wedding_id=str(wedding.id)),
            )
            raise payments_not_configured()

        amount = Decimal(payload.amount).quantize(_CENT)
        if amount < credentials.min_amount:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={
                    "error": "amount_below_minimum",
                    "message": (
                        f"Minimum contribution is {credentials.min_amount} {wedding.currency}."
                    ),
                },
            )

        contribution = Contribution(
            wedding_id=wedding.id,
            contributor_name=payload.contributor_name,
            contributor_email=str(payload.contributor_email) if payload.contributor_email else None,
            message=payload.message,
            amount=amount,
            currency=wedding.currency,
            status=ContributionStatus.PENDING,
            provider=PaymentProvider.MERCADOPAGO,
        )
        await self._repo.add(contribution)

        page_url = public_url_for(wedding, self._settings)
        back_url = f"{page_url}?contribution={contribution.id}&result="
        partners = f"{wedding.partner_one_name} & {wedding.partner_two_name}"
        request = CheckoutRequest(
            reference=str(contribution.id),
            title=translate(
                locale,
                "contribution.checkout_title",
                default_locale=self._settings.default_locale,
                partners=partners,
            ),
            amount=amount,
            currency=wedding.currency,
            notification_url=webhook_url_for(wedding.id, self._settings),
            payer_name=contribution.contributor_name,
            payer_email=contribution.contributor_email,
            success_url=f"{back_url}success",
            failure_url=f"{back_url}failure",
            pending_url=f"{back_url}pending",
            metadata={"wedding_id": str(wedding.id), "contribution_id": str(contribution.id)},
        )

        try:
            checkout = await self._gateway.create_checkout(
                access_token=credentials.access_token,
                request=request,
            )
        except PaymentGatewayError as exc:
            logger.warning(
                "contribution.checkout.provider_error",
                extra=log_context(
                    wedding_id=str(wedding.id),
                    contribution_id=str(contribution.id),
                    provider_status=exc.status_code,
                ),
            )
            raise payment_provider_error(exc) from exc

        contribution.provider_preference_id = checkout.preference_id
        contribution.checkout_url = checkout.checkout_url
        await self._session.flush()

        logger.info(
            "contribution.checkout.success",
            extra=log_context(
                wedding_id=str(wedding.id),
                contribution_id=str(contribution.id),
                amount=str(amount),
                currency=wedding.currency,
            ),
        )
        return ContributionCheckout(
            contribution_id=contribution.id,
            status=ContributionStatus.PENDING,
            amount=amount,
            currency=wedding.currency,
            checkout_url=checkout.checkout_url,
            public_key=credentials.public_key,
        )


__all__ = ["ContributionsService", "payment_provider_error", "payments_not_configured"]
