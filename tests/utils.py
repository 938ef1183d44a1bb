"""Helper functions shared across tests."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from httpx import AsyncClient

from boda_api.features.payments.signatures import build_manifest, compute_signature

DEFAULT_PASSWORD = "correct-horse-battery"
DEFAULT_TS = "1704908010"
WEBHOOK_SECRET = "test-webhook-secret"
JWT_SECRET = "test-jwt-secret-that-is-long-enough-for-hs256"


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid4().hex[:10]}@example.com"


async def register(
    client: AsyncClient,
    *,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
    display_name: str | None = None,
    keep_cookies: bool = False,
) -> dict[str, Any]:
    """Create an account and return the session envelope.

    Session cookies are dropped unless ``keep_cookies`` is set so later calls
    authenticate only through explicit headers.
    """

    response = await client.post(
        "/api/v1/auth/register",
        json={
            "email": email or unique_email(),
            "password": password,
            "display_name": display_name,
        },
    )
    assert response.status_code == 201, response.text
    if not keep_cookies:
        client.cookies.clear()
    return response.json()


async def login(
    client: AsyncClient,
    *,
    email: str,
    password: str = DEFAULT_PASSWORD,
) -> tuple[str, dict[str, Any]]:
    """Authenticate ``email``/``password`` returning (access_token, payload)."""

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password},
    )
    assert response.status_code == 200, response.text
    payload = response.json()
    token = payload["session"]["access_token"]
    assert token, "Access token missing"
    return token, payload


def bearer(envelope: dict[str, Any] | str) -> dict[str, str]:
    token = envelope if isinstance(envelope, str) else envelope["session"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


async def owner_headers(client: AsyncClient) -> dict[str, str]:
    return bearer(await register(client))


async def create_wedding(
    client: AsyncClient,
    headers: dict[str, str],
    **overrides: Any,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "partner_one_name": "Ana",
        "partner_two_name": "Luis",
        "event_date": "2030-11-20",
        "venue_name": "Estancia La Paz",
        "currency": "ARS",
    }
    body.update(overrides)
    response = await client.post("/api/v1/weddings", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def publish(client: AsyncClient, headers: dict[str, str], wedding_id: str) -> None:
    response = await client.post(f"/api/v1/weddings/{wedding_id}/publish", headers=headers)
    assert response.status_code == 200, response.text


async def create_guest(
    client: AsyncClient,
    headers: dict[str, str],
    wedding_id: str,
    **overrides: Any,
) -> dict[str, Any]:
    body: dict[str, Any] = {"full_name": "Marta Gómez", "party_size": 2}
    body.update(overrides)
    response = await client.post(
        f"/api/v1/weddings/{wedding_id}/guests", json=body, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


async def enable_payments(
    client: AsyncClient,
    headers: dict[str, str],
    wedding_id: str,
    **overrides: Any,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "access_token": "TEST-1234567890-abcd",
        "public_key": "TEST-public-key",
        "is_enabled": True,
    }
    body.update(overrides)
    response = await client.put(
        f"/api/v1/weddings/{wedding_id}/payment-config", json=body, headers=headers
    )
    assert response.status_code == 200, response.text
    return response.json()


def signature_headers(
    secret: str,
    *,
    data_id: str | None,
    request_id: str = "req-1",
    ts: str = DEFAULT_TS,
) -> dict[str, str]:
    manifest = build_manifest(data_id=data_id, request_id=request_id, ts=ts)
    return {
        "x-signature": f"ts={ts},v1={compute_signature(secret, manifest)}",
        "x-request-id": request_id,
    }


__all__ = [
    "DEFAULT_PASSWORD",
    "JWT_SECRET",
    "WEBHOOK_SECRET",
    "bearer",
    "create_guest",
    "create_wedding",
    "enable_payments",
    "login",
    "owner_headers",
    "publish",
    "register",
    "signature_headers",
    "unique_email",
]
