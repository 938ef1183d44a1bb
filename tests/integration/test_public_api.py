"""Anonymous wedding page, invitation and RSVP endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from tests.utils import create_guest, create_wedding, owner_headers, publish


async def _published(client: AsyncClient, **overrides) -> tuple[dict[str, str], dict]:
    headers = await owner_headers(client)
    wedding = await create_wedding(client, headers, **overrides)
    await publish(client, headers, wedding["id"])
    return headers, wedding


@pytest.mark.asyncio
async def test_unpublished_wedding_is_hidden(async_client: AsyncClient) -> None:
    """Drafts and unknown slugs both answer 404."""
    headers = await owner_headers(async_client)
    await create_wedding(async_client, headers)

    draft = await async_client.get("/api/v1/public/es/boda/ana-y-luis")
    unknown = await async_client.get("/api/v1/public/es/boda/no-existe")

    assert draft.status_code == 404
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_public_page_in_spanish(async_client: AsyncClient) -> None:
    """The page carries wedding details with Spanish labels."""
    await _published(async_client, rsvp_deadline="2030-10-01")

    response = await async_client.get("/api/v1/public/es/boda/ana-y-luis")

    assert response.status_code == 200
    assert response.headers["content-language"] == "es"
    page = response.json()
    assert page["title"] == "La boda de Ana & Luis"
    assert page["venue_name"] == "Estancia La Paz"
    assert page["rsvp_open"] is True
    assert page["contributions_enabled"] is False
    assert page["min_contribution"] is None
    assert page["labels"]["page.venue"] == "Lugar"
    assert page["labels"]["page.rsvp_deadline"] == "Confirmá tu asistencia antes del 2030-10-01"
    assert "rsvp.title" not in page["labels"]


@pytest.mark.asyncio
async def test_public_page_in_english(async_client: AsyncClient) -> None:
    """The language segment selects the dictionary."""
    await _published(async_client)

    response = await async_client.get("/api/v1/public/en/boda/ANA-Y-LUIS")

    assert response.status_code == 200
    assert response.headers["content-language"] == "en"
    page = response.json()
    assert page["title"] == "Ana & Luis are getting married"
    assert page["labels"]["page.gifts"] == "Gifts"
    assert "page.rsvp_deadline" not in page["labels"]


@pytest.mark.asyncio
async def test_unknown_language_falls_back_to_default(async_client: AsyncClient) -> None:
    """Unsupported language segments render in the default locale."""
    await _published(async_client, title="Nos casamos")

    response = await async_client.get("/api/v1/public/fr/boda/ana-y-luis")

    assert response.status_code == 200
    assert response.json()["locale"] == "es"
    assert response.json()["title"] == "Nos casamos"


@pytest.mark.asyncio
async def test_language_negotiated_from_accept_language(async_client: AsyncClient) -> None:
    """Without a language segment the Accept-Language header decides."""
    await _published(async_client)

    english = await async_client.get(
        "/api/v1/public/boda/ana-y-luis", headers={"Accept-Language": "en-US,en;q=0.9"}
    )
    fallback = await async_client.get("/api/v1/public/boda/ana-y-luis")

    assert english.json()["locale"] == "en"
    assert english.headers["content-language"] == "en"
    assert fallback.json()["locale"] == "es"


@pytest.mark.asyncio
async def test_invitation_view(async_client: AsyncClient) -> None:
    """Guests see their own invitation with personalised labels."""
    headers, wedding = await _published(async_client)
    guest = await create_guest(async_client, headers, wedding["id"], party_size=3)

    response = await async_client.get(
        f"/api/v1/public/en/boda/ana-y-luis/invitations/{guest['invite_code']}"
    )

    assert response.status_code == 200
    invitation = response.json()
    assert invitation["full_name"] == "Marta Gómez"
    assert invitation["party_size"] == 3
    assert invitation["rsvp_status"] == "pending"
    assert invitation["labels"]["rsvp.greeting"] == "Hi Marta Gómez!"
    assert invitation["labels"]["rsvp.party_size"] == "Seats reserved: 3"


@pytest.mark.asyncio
async def test_invitation_codes_are_scoped_to_their_wedding(async_client: AsyncClient) -> None:
    """A valid code for another wedding is not accepted."""
    headers, wedding = await _published(async_client)
    _, other = await _published(async_client, partner_one_name="Eva", partner_two_name="Tom")
    guest = await create_guest(async_client, headers, wedding["id"])

    wrong_wedding = await async_client.get(
        f"/api/v1/public/es/boda/{other['slug']}/invitations/{guest['invite_code']}"
    )
    wrong_code = await async_client.get("/api/v1/public/es/boda/ana-y-luis/invitations/nope")

    assert wrong_wedding.status_code == 404
    assert wrong_code.status_code == 404


@pytest.mark.asyncio
async def test_guest_accepts_invitation(async_client: AsyncClient) -> None:
    """Accepting records the head count and thanks the guest."""
    headers, wedding = await _published(async_client)
    guest = await create_guest(async_client, headers, wedding["id"], party_size=3)
    url = f"/api/v1/public/es/boda/ana-y-luis/invitations/{guest['invite_code']}/rsvp"

    response = await async_client.post(
        url, json={"response": "attending", "attending_count": 2, "message": " ¡Felicidades! "}
    )

    assert response.status_code == 200, response.text
    result = response.json()
    assert result["rsvp_status"] == "attending"
    assert result["attending_count"] == 2
    assert result["responded_at"] is not None
    assert result["confirmation"] == "¡Gracias! Te esperamos."

    stored = await async_client.get(
        f"/api/v1/weddings/{wedding['id']}/guests/{guest['id']}", headers=headers
    )
    assert stored.json()["message"] == "¡Felicidades!"
    assert stored.json()["attending_count"] == 2


@pytest.mark.asyncio
async def test_guest_declines_invitation(async_client: AsyncClient) -> None:
    """Declining zeroes the head count."""
    headers, wedding = await _published(async_client)
    guest = await create_guest(async_client, headers, wedding["id"])

    response = await async_client.post(
        f"/api/v1/public/en/boda/ana-y-luis/invitations/{guest['invite_code']}/rsvp",
        json={"response": "declined"},
    )

    assert response.status_code == 200
    assert response.json()["attending_count"] == 0
    assert response.json()["confirmation"] == "Thanks for letting us know. You will be missed!"


@pytest.mark.asyncio
async def test_guest_rsvp_validation(async_client: AsyncClient) -> None:
    """Guests cannot reset to pending or exceed their party size."""
    headers, wedding = await _published(async_client)
    guest = await create_guest(async_client, headers, wedding["id"], party_size=2)
    url = f"/api/v1/public/es/boda/ana-y-luis/invitations/{guest['invite_code']}/rsvp"

    pending = await async_client.post(url, json={"response": "pending"})
    too_many = await async_client.post(url, json={"response": "attending", "attending_count": 3})

    assert pending.status_code == 422
    assert too_many.status_code == 422
    assert too_many.json()["detail"]["error"] == "invalid_attending_count"


@pytest.mark.asyncio
async def test_rsvp_closed_after_deadline(async_client: AsyncClient) -> None:
    """Answers after the deadline are refused while owners can still edit."""
    headers, wedding = await _published(async_client)
    guest = await create_guest(async_client, headers, wedding["id"])
    await async_client.patch(
        f"/api/v1/weddings/{wedding['id']}",
        json={"event_date": "2020-01-10", "rsvp_deadline": "2020-01-01"},
        headers=headers,
    )

    page = await async_client.get("/api/v1/public/es/boda/ana-y-luis")
    response = await async_client.post(
        f"/api/v1/public/es/boda/ana-y-luis/invitations/{guest['invite_code']}/rsvp",
        json={"response": "attending"},
    )
    owner = await async_client.post(
        f"/api/v1/weddings/{wedding['id']}/guests/{guest['id']}/rsvp",
        json={"rsvp_status": "attending"},
        headers=headers,
    )

    assert page.json()["rsvp_open"] is False
    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "rsvp_closed"
    assert owner.status_code == 200
