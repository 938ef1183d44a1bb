"""Public checkout and owner contribution listings."""

from __future__ import annotations

from decimal import Decimal

import pytest
from httpx import AsyncClient
from pydantic import SecretStr

from boda_api.features.payments.gateway import PaymentGatewayError
from tests.fakes import FakePaymentGateway
from tests.utils import create_wedding, enable_payments, owner_headers, publish

GIFT = {
    "contributor_name": "Tía Rosa",
    "contributor_email": "rosa@example.com",
    "message": "¡Felicidades!",
    "amount": "15000.5",
}


async def _published(client: AsyncClient) -> tuple[dict[str, str], dict]:
    headers = await owner_headers(client)
    wedding = await create_wedding(client, headers)
    await publish(client, headers, wedding["id"])
    return headers, wedding


@pytest.mark.asyncio
async def test_checkout_requires_payment_configuration(async_client: AsyncClient) -> None:
    """Weddings without credentials do not accept gifts."""
    await _published(async_client)

    response = await async_client.post("/api/v1/public/es/boda/ana-y-luis/contributions", json=GIFT)

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "payments_not_configured"


@pytest.mark.asyncio
async def test_checkout_for_unpublished_wedding_is_not_found(async_client: AsyncClient) -> None:
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)
    await enable_payments(async_client, headers, wedding["id"])

    response = await async_client.post("/api/v1/public/es/boda/ana-y-luis/contributions", json=GIFT)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_checkout_creates_pending_contribution(
    async_client: AsyncClient, payment_gateway: FakePaymentGateway
) -> None:
    """A checkout stores a pending gift and hands back the provider URL."""
    headers, wedding = await _published(async_client)
    await enable_payments(async_client, headers, wedding["id"])

    response = await async_client.post("/api/v1/public/en/boda/ana-y-luis/contributions", json=GIFT)

    assert response.status_code == 201, response.text
    checkout = response.json()
    assert checkout["status"] == "pending"
    assert Decimal(checkout["amount"]) == Decimal("15000.50")
    assert checkout["currency"] == "ARS"
    assert checkout["checkout_url"] == "https://checkout.test/pref-1"
    assert checkout["public_key"] == "TEST-public-key"

    token, request = payment_gateway.checkouts[0]
    assert token == "TEST-1234567890-abcd"
    assert request.reference == checkout["contribution_id"]
    assert request.title == "Gift for Ana & Luis"
    assert request.notification_url == (
        f"http://testserver/api/v1/payments/webhooks/mercadopago/{wedding['id']}"
    )
    assert request.success_url == (
        "http://frontend.test/es/boda/ana-y-luis"
        f"?contribution={checkout['contribution_id']}&result=success"
    )
    assert request.payer_email == "rosa@example.com"

    stored = await async_client.get(
        f"/api/v1/weddings/{wedding['id']}/contributions/{checkout['contribution_id']}",
        headers=headers,
    )
    assert stored.status_code == 200
    assert stored.json()["status"] == "pending"
    assert stored.json()["contributor_name"] == "Tía Rosa"
    assert stored.json()["provider"] == "mercadopago"


@pytest.mark.asyncio
async def test_checkout_enforces_minimum_amount(async_client: AsyncClient) -> None:
    """Gifts below the configured minimum are refused."""
    headers, wedding = await _published(async_client)
    await enable_payments(async_client, headers, wedding["id"], min_amount="1000")

    low = await async_client.post(
        "/api/v1/public/es/boda/ana-y-luis/contributions", json={**GIFT, "amount": "999.99"}
    )
    negative = await async_client.post(
        "/api/v1/public/es/boda/ana-y-luis/contributions", json={**GIFT, "amount": "-5"}
    )

    assert low.status_code == 422
    assert low.json()["detail"]["error"] == "amount_below_minimum"
    assert negative.status_code == 422


@pytest.mark.asyncio
async def test_provider_failure_does_not_persist_contribution(
    async_client: AsyncClient, payment_gateway: FakePaymentGateway
) -> None:
    """A failed checkout leaves no pending gift behind."""
    headers, wedding = await _published(async_client)
    await enable_payments(async_client, headers, wedding["id"])
    payment_gateway.error = PaymentGatewayError("boom", status_code=500)

    response = await async_client.post("/api/v1/public/es/boda/ana-y-luis/contributions", json=GIFT)
    listing = await async_client.get(
        f"/api/v1/weddings/{wedding['id']}/contributions",
        params={"include_total": True},
        headers=headers,
    )

    assert response.status_code == 502
    assert response.json()["detail"]["error"] == "payment_provider_error"
    assert listing.json()["total"] == 0


@pytest.mark.asyncio
async def test_global_access_token_is_used_without_wedding_config(
    async_client: AsyncClient,
    payment_gateway: FakePaymentGateway,
    override_settings,
) -> None:
    """The deployment-wide token covers weddings without their own."""
    override_settings(
        mercadopago_access_token=SecretStr("APP_USR-global-token"),
        mercadopago_public_key="APP_USR-public",
    )
    await _published(async_client)

    page = await async_client.get("/api/v1/public/es/boda/ana-y-luis")
    response = await async_client.post("/api/v1/public/es/boda/ana-y-luis/contributions", json=GIFT)

    assert page.json()["contributions_enabled"] is True
    assert page.json()["payment_public_key"] == "APP_USR-public"
    assert response.status_code == 201, response.text
    assert payment_gateway.checkouts[0][0] == "APP_USR-global-token"


@pytest.mark.asyncio
async def test_owner_lists_contributions_by_status(
    async_client: AsyncClient, payment_gateway: FakePaymentGateway
) -> None:
    """Owners can filter gifts by status; other users cannot see them."""
    headers, wedding = await _published(async_client)
    await enable_payments(async_client, headers, wedding["id"])
    await async_client.post("/api/v1/public/es/boda/ana-y-luis/contributions", json=GIFT)
    await async_client.post(
        "/api/v1/public/es/boda/ana-y-luis/contributions",
        json={**GIFT, "contributor_name": "Tío Juan", "amount": "2000"},
    )
    base = f"/api/v1/weddings/{wedding['id']}/contributions"

    pending = await async_client.get(base, params={"status": "pending"}, headers=headers)
    approved = await async_client.get(base, params={"status": "approved"}, headers=headers)
    stranger = await async_client.get(base, headers=await owner_headers(async_client))

    assert len(pending.json()["items"]) == 2
    assert approved.json()["items"] == []
    assert stranger.status_code == 404
    assert len(payment_gateway.checkouts) == 2
