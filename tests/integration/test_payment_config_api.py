"""Owner payment configuration endpoints."""

from __future__ import annotations

from uuid import UUID

import pytest
from httpx import AsyncClient
from pydantic import SecretStr
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.models import PaymentConfig
from tests.utils import create_wedding, enable_payments, owner_headers, publish


@pytest.mark.asyncio
async def test_defaults_without_configuration(async_client: AsyncClient) -> None:
    """Weddings start with the deployment defaults and no token."""
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)

    response = await async_client.get(
        f"/api/v1/weddings/{wedding['id']}/payment-config", headers=headers
    )

    assert response.status_code == 200
    config = response.json()
    assert config["provider"] == "mercadopago"
    assert config["is_enabled"] is True
    assert config["has_access_token"] is False
    assert config["access_token_hint"] is None
    assert config["uses_global_token"] is False
    assert config["min_amount"] == "1.00"
    assert config["updated_at"] is None
    assert config["webhook_url"] == (
        f"http://testserver/api/v1/payments/webhooks/mercadopago/{wedding['id']}"
    )


@pytest.mark.asyncio
async def test_access_token_is_stored_encrypted_and_masked(
    async_client: AsyncClient, session: AsyncSession
) -> None:
    """Only a masked hint of the token ever leaves the server."""
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)

    config = await enable_payments(async_client, headers, wedding["id"], min_amount="500")

    assert config["has_access_token"] is True
    assert config["access_token_hint"] == "****abcd"
    assert config["public_key"] == "TEST-public-key"
    assert config["min_amount"] == "500.00"
    assert "access_token" not in config
    assert "TEST-1234567890-abcd" not in str(config)

    stmt = select(PaymentConfig).where(PaymentConfig.wedding_id == UUID(wedding["id"]))
    row = (await session.execute(stmt)).scalar_one()
    assert row.access_token_encrypted
    assert "TEST-1234567890-abcd" not in row.access_token_encrypted


@pytest.mark.asyncio
async def test_partial_updates_keep_the_token(async_client: AsyncClient) -> None:
    """Omitting the token keeps it; null removes it."""
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)
    url = f"/api/v1/weddings/{wedding['id']}/payment-config"
    await enable_payments(async_client, headers, wedding["id"])

    kept = await async_client.put(url, json={"public_key": "  "}, headers=headers)
    removed = await async_client.put(url, json={"access_token": None}, headers=headers)
    short = await async_client.put(url, json={"access_token": "abc"}, headers=headers)
    empty = await async_client.put(url, json={}, headers=headers)

    assert kept.json()["has_access_token"] is True
    assert kept.json()["public_key"] is None
    assert removed.json()["has_access_token"] is False
    assert removed.json()["access_token_hint"] is None
    assert short.status_code == 422
    assert empty.status_code == 422


@pytest.mark.asyncio
async def test_disabling_payments_closes_contributions(async_client: AsyncClient) -> None:
    """The public page follows the enabled flag."""
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)
    await publish(async_client, headers, wedding["id"])
    await enable_payments(async_client, headers, wedding["id"], min_amount="250.5")

    enabled = await async_client.get("/api/v1/public/es/boda/ana-y-luis")
    await enable_payments(async_client, headers, wedding["id"], is_enabled=False)
    disabled = await async_client.get("/api/v1/public/es/boda/ana-y-luis")

    assert enabled.json()["contributions_enabled"] is True
    assert enabled.json()["min_contribution"] == "250.50"
    assert enabled.json()["payment_public_key"] == "TEST-public-key"
    assert disabled.json()["contributions_enabled"] is False


@pytest.mark.asyncio
async def test_global_token_is_reported(async_client: AsyncClient, override_settings) -> None:
    override_settings(mercadopago_access_token=SecretStr("APP_USR-global-token"))
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)

    response = await async_client.get(
        f"/api/v1/weddings/{wedding['id']}/payment-config", headers=headers
    )

    assert response.json()["uses_global_token"] is True
    assert response.json()["has_access_token"] is False


@pytest.mark.asyncio
async def test_other_owners_cannot_touch_configuration(async_client: AsyncClient) -> None:
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)
    stranger = await owner_headers(async_client)
    url = f"/api/v1/weddings/{wedding['id']}/payment-config"

    read = await async_client.get(url, headers=stranger)
    write = await async_client.put(url, json={"is_enabled": False}, headers=stranger)

    assert read.status_code == 404
    assert write.status_code == 404
