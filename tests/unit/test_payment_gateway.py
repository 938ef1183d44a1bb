"""Mercado Pago client behaviour against an in-memory SDK."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import pytest
import requests
from mercadopago.config import RequestOptions

from boda_api.features.payments.gateway import (
    CheckoutRequest,
    MercadoPagoGateway,
    PaymentGatewayError,
    map_provider_status,
)
from boda_api.models import ContributionStatus


class _Resource:
    def __init__(self, sdk: _StubSdk) -> None:
        self._sdk = sdk

    def create(self, body: dict[str, Any]) -> Any:
        self._sdk.calls.append(("preference.create", body))
        return self._sdk.reply()

    def get(self, payment_id: str) -> Any:
        self._sdk.calls.append(("payment.get", payment_id))
        return self._sdk.reply()


class _StubSdk:
    """Records SDK construction and calls; answers with a canned result."""

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.tokens: list[str] = []
        self.options: list[RequestOptions] = []
        self.calls: list[tuple[str, Any]] = []

    def __call__(self, access_token: str, options: RequestOptions) -> _StubSdk:
        self.tokens.append(access_token)
        self.options.append(options)
        return self

    def preference(self) -> _Resource:
        return _Resource(self)

    def payment(self) -> _Resource:
        return _Resource(self)

    def reply(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.result


def _gateway(sdk: _StubSdk) -> MercadoPagoGateway:
    return MercadoPagoGateway(timeout=5.0, sdk_factory=sdk)


def _request(**overrides) -> CheckoutRequest:
    values = {
        "reference": "0b6f7c1e-1111-4c1d-9c51-2d3c0f9e1a10",
        "title": "Regalo para Ana & Luis",
        "amount": Decimal("15000.50"),
        "currency": "ARS",
        "notification_url": "https://boda.test/api/v1/payments/webhooks/mercadopago/w1",
        "payer_name": "Tía Rosa",
        "payer_email": None,
        "success_url": "https://boda.test/es/boda/ana-y-luis?result=success",
    }
    values.update(overrides)
    return CheckoutRequest(**values)


PREFERENCE = {
    "status": 201,
    "response": {
        "id": "pref-1",
        "init_point": "https://mp.test/init",
        "sandbox_init_point": "https://sandbox.mp.test/init",
    },
}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("approved", ContributionStatus.APPROVED),
        ("in_mediation", ContributionStatus.IN_PROCESS),
        ("authorized", ContributionStatus.IN_PROCESS),
        (" Rejected ", ContributionStatus.REJECTED),
        ("charged_back", ContributionStatus.CHARGED_BACK),
    ],
)
def test_map_provider_status(raw: str, expected: ContributionStatus) -> None:
    assert map_provider_status(raw) is expected


def test_map_provider_status_rejects_unknown() -> None:
    with pytest.raises(PaymentGatewayError):
        map_provider_status("teleported")


@pytest.mark.asyncio
async def test_create_checkout_creates_preference() -> None:
    """The preference carries the reference, price and payer."""
    sdk = _StubSdk(PREFERENCE)

    session = await _gateway(sdk).create_checkout(
        access_token="APP_USR-prod", request=_request()
    )

    assert session.preference_id == "pref-1"
    assert session.checkout_url == "https://mp.test/init"
    assert sdk.tokens == ["APP_USR-prod"]
    options = sdk.options[0]
    assert options.connection_timeout == 5.0
    assert options.custom_headers == {"x-idempotency-key": _request().reference}
    operation, body = sdk.calls[0]
    assert operation == "preference.create"
    assert body["external_reference"] == _request().reference
    assert body["items"][0]["unit_price"] == 15000.5
    assert body["items"][0]["currency_id"] == "ARS"
    assert body["payer"] == {"name": "Tía Rosa"}
    assert body["back_urls"] == {"success": _request().success_url}
    assert body["auto_return"] == "approved"


@pytest.mark.asyncio
async def test_create_checkout_uses_sandbox_for_test_tokens() -> None:
    """TEST- tokens are sent to the sandbox checkout."""
    session = await _gateway(_StubSdk(PREFERENCE)).create_checkout(
        access_token="TEST-123", request=_request()
    )

    assert session.checkout_url == "https://sandbox.mp.test/init"


@pytest.mark.asyncio
async def test_create_checkout_requires_checkout_url() -> None:
    """A preference without an init point is an error."""
    sdk = _StubSdk({"status": 201, "response": {"id": "pref-3"}})

    with pytest.raises(PaymentGatewayError):
        await _gateway(sdk).create_checkout(access_token="APP_USR-x", request=_request())


@pytest.mark.asyncio
async def test_get_payment_parses_provider_payload() -> None:
    """Payment lookups map status, amount and approval time."""
    sdk = _StubSdk(
        {
            "status": 200,
            "response": {
                "id": 123,
                "status": "approved",
                "status_detail": "accredited",
                "external_reference": "ref-1",
                "transaction_amount": 1500.5,
                "currency_id": "ARS",
                "date_approved": "2030-05-01T12:00:00.000-03:00",
            },
        }
    )

    payment = await _gateway(sdk).get_payment(access_token="APP_USR-x", payment_id="123")

    assert sdk.calls == [("payment.get", "123")]
    assert payment.payment_id == "123"
    assert payment.status is ContributionStatus.APPROVED
    assert payment.status_detail == "accredited"
    assert payment.reference == "ref-1"
    assert payment.amount == Decimal("1500.5")
    assert payment.approved_at == datetime(2030, 5, 1, 15, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_provider_error_status_raises_gateway_error() -> None:
    """4xx/5xx results surface as PaymentGatewayError with the status code."""
    sdk = _StubSdk({"status": 401, "response": {"message": "invalid token"}})

    with pytest.raises(PaymentGatewayError) as excinfo:
        await _gateway(sdk).get_payment(access_token="bad", payment_id="1")

    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_transport_errors_raise_gateway_error() -> None:
    """Network failures surface as PaymentGatewayError."""
    sdk = _StubSdk(error=requests.ConnectionError("boom"))

    with pytest.raises(PaymentGatewayError):
        await _gateway(sdk).get_payment(access_token="APP_USR-x", payment_id="1")


@pytest.mark.asyncio
async def test_non_object_payload_is_rejected() -> None:
    """A list is not a valid provider response."""
    sdk = _StubSdk({"status": 200, "response": [1, 2, 3]})

    with pytest.raises(PaymentGatewayError):
        await _gateway(sdk).get_payment(access_token="APP_USR-x", payment_id="1")
