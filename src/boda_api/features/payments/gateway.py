"""Payment provider gateway backed by the Mercado Pago SDK.

The rest of the application talks to :class:`PaymentGateway`; the concrete
:class:`MercadoPagoGateway` translates those calls into Checkout Pro calls
through the official ``mercadopago`` SDK:

* ``preference().create`` builds the hosted checkout for a contribution
  (``external_reference`` carries the contribution id).
* ``payment().get`` fetches the authoritative payment state when a webhook
  arrives.

The SDK is synchronous, so every call runs in the threadpool.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

import mercadopago
import requests
from fastapi.concurrency import run_in_threadpool
from mercadopago.config import RequestOptions

from boda_api.common.logging import log_context
from boda_api.models import ContributionStatus
from boda_api.settings import Settings

logger = logging.getLogger(__name__)

_SANDBOX_TOKEN_PREFIX = "TEST-"

# Provider status -> contribution status.
_STATUS_MAP: dict[str, ContributionStatus] = {
    "pending": ContributionStatus.PENDING,
    "authorized": ContributionStatus.IN_PROCESS,
    "in_process": ContributionStatus.IN_PROCESS,
    "in_mediation": ContributionStatus.IN_PROCESS,
    "approved": ContributionStatus.APPROVED,
    "rejected": ContributionStatus.REJECTED,
    "cancelled": ContributionStatus.CANCELLED,
    "refunded": ContributionStatus.REFUNDED,
    "charged_back": ContributionStatus.CHARGED_BACK,
}


class PaymentGatewayError(RuntimeError):
    """Raised when the payment provider cannot be reached or rejects a call."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


@dataclass(slots=True)
class CheckoutRequest:
    """Everything the provider needs to build a hosted checkout."""

    reference: str
    title: str
    amount: Decimal
    currency: str
    notification_url: str
    payer_name: str | None = None
    payer_email: str | None = None
    success_url: str | None = None
    failure_url: str | None = None
    pending_url: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class CheckoutSession:
    preference_id: str
    checkout_url: str


@dataclass(slots=True)
class ProviderPayment:
    """Provider view of a single payment."""

    payment_id: str
    status: ContributionStatus
    raw_status: str
    status_detail: str | None
    reference: str | None
    amount: Decimal | None
    currency: str | None
    approved_at: datetime | None


@runtime_checkable
class PaymentGateway(Protocol):
    """Interface for the hosted-checkout payment provider."""

    async def create_checkout(
        self, *, access_token: str, request: CheckoutRequest
    ) -> CheckoutSession: ...

    async def get_payment(self, *, access_token: str, payment_id: str) -> ProviderPayment: ...

    async def aclose(self) -> None: ...


def map_provider_status(raw_status: str) -> ContributionStatus:
    """Translate a provider payment status to a contribution status."""

    try:
        return _STATUS_MAP[raw_status.strip().lower()]
    except KeyError as exc:
        raise PaymentGatewayError(f"Unknown provider payment status: {raw_status!r}") from exc


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _sdk_for(access_token: str, options: RequestOptions) -> Any:
    return mercadopago.SDK(access_token, request_options=options)


class MercadoPagoGateway:
    """Mercado Pago Checkout Pro client."""

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        sdk_factory: Callable[[str, RequestOptions], Any] = _sdk_for,
    ) -> None:
        self._timeout = timeout
        self._sdk_factory = sdk_factory

    @classmethod
    def from_settings(cls, settings: Settings) -> MercadoPagoGateway:
        return cls(timeout=settings.payment_request_timeout.total_seconds())

    async def aclose(self) -> None:
        # The SDK opens a session per call; nothing is pooled here.
        return None

    async def create_checkout(
        self, *, access_token: str, request: CheckoutRequest
    ) -> CheckoutSession:
        item: dict[str, Any] = {
            "id": request.reference,
            "title": request.title,
            "quantity": 1,
            "currency_id": request.currency,
            "unit_price": float(request.amount),
        }
        body: dict[str, Any] = {
            "items": [item],
            "external_reference": request.reference,
            "notification_url": request.notification_url,
            "metadata": dict(request.metadata),
        }
        payer = {
            key: value
            for key, value in (("name", request.payer_name), ("email", request.payer_email))
            if value
        }
        if payer:
            body["payer"] = payer
        back_urls = {
            key: value
            for key, value in (
                ("success", request.success_url),
                ("failure", request.failure_url),
                ("pending", request.pending_url),
            )
            if value
        }
        if back_urls:
            body["back_urls"] = back_urls
            if "success" in back_urls:
                body["auto_return"] = "approved"

        sdk = self._sdk(access_token, idempotency_key=request.reference)
        data = await self._call(
            "preference.create",
            lambda: sdk.preference().create(body),
        )

        preference_id = str(data.get("id") or "").strip()
        use_sandbox = access_token.startswith(_SANDBOX_TOKEN_PREFIX)
        checkout_url = (
            data.get("sandbox_init_point") if use_sandbox else None
        ) or data.get("init_point")
        if not preference_id or not checkout_url:
            raise PaymentGatewayError("Provider response is missing the checkout URL")

        logger.info(
            "payments.checkout.created",
            extra=log_context(reference=request.reference, preference_id=preference_id),
        )
        return CheckoutSession(preference_id=preference_id, checkout_url=str(checkout_url))

    async def get_payment(self, *, access_token: str, payment_id: str) -> ProviderPayment:
        sdk = self._sdk(access_token)
        data = await self._call("payment.get", lambda: sdk.payment().get(payment_id))

        raw_status = str(data.get("status") or "")
        amount = data.get("transaction_amount")
        reference = data.get("external_reference")
        return ProviderPayment(
            payment_id=str(data.get("id") or payment_id),
            status=map_provider_status(raw_status),
            raw_status=raw_status,
            status_detail=data.get("status_detail"),
            reference=str(reference) if reference else None,
            amount=Decimal(str(amount)) if amount is not None else None,
            currency=data.get("currency_id"),
            approved_at=_parse_datetime(data.get("date_approved")),
        )

    def _options(self, idempotency_key: str | None = None) -> RequestOptions:
        headers = {"x-idempotency-key": idempotency_key} if idempotency_key else None
        return RequestOptions(connection_timeout=self._timeout, custom_headers=headers)

    def _sdk(self, access_token: str, *, idempotency_key: str | None = None) -> Any:
        return self._sdk_factory(access_token, self._options(idempotency_key))

    async def _call(self, operation: str, call: Callable[[], Any]) -> dict[str, Any]:
        try:
            result = await run_in_threadpool(call)
        except requests.RequestException as exc:
            logger.warning(
                "payments.provider.unreachable",
                extra=log_context(operation=operation, error=type(exc).__name__),
            )
            raise PaymentGatewayError("Payment provider is unreachable") from exc

        if not isinstance(result, dict):
            raise PaymentGatewayError("Payment provider returned an unexpected payload")
        status_code = result.get("status")
        if not isinstance(status_code, int) or status_code >= 400:
            logger.warning(
                "payments.provider.error",
                extra=log_context(operation=operation, status_code=status_code),
            )
            raise PaymentGatewayError(
                f"Payment provider returned HTTP {status_code}",
                status_code=status_code if isinstance(status_code, int) else None,
            )

        payload = result.get("response")
        if not isinstance(payload, dict):
            raise PaymentGatewayError("Payment provider returned an unexpected payload")
        return payload


__all__ = [
    "CheckoutRequest",
    "CheckoutSession",
    "MercadoPagoGateway",
    "PaymentGateway",
    "PaymentGatewayError",
    "ProviderPayment",
    "map_provider_status",
]
