"""Guest list endpoints."""

from __future__ import annotations

from uuid import uuid4

import pytest
from httpx import AsyncClient

from tests.utils import create_guest, create_wedding, owner_headers


async def _wedding(client: AsyncClient) -> tuple[dict[str, str], dict]:
    headers = await owner_headers(client)
    return headers, await create_wedding(client, headers)


@pytest.mark.asyncio
async def test_create_guest_issues_invitation_link(async_client: AsyncClient) -> None:
    """New guests start pending with a personal invitation URL."""
    headers, wedding = await _wedding(async_client)

    guest = await create_guest(
        async_client, headers, wedding["id"], email="  Marta@Example.com ", phone="+54 11 5555"
    )

    assert guest["rsvp_status"] == "pending"
    assert guest["attending_count"] is None
    assert guest["party_size"] == 2
    assert guest["email"].lower() == "marta@example.com"
    assert guest["invite_code"]
    assert guest["invite_url"] == (
        f"http://frontend.test/es/boda/ana-y-luis?invite={guest['invite_code']}"
    )


@pytest.mark.asyncio
async def test_guest_emails_are_unique_per_wedding(async_client: AsyncClient) -> None:
    """The same email cannot be invited twice to one wedding."""
    headers, wedding = await _wedding(async_client)
    await create_guest(async_client, headers, wedding["id"], email="primo@example.com")

    response = await async_client.post(
        f"/api/v1/weddings/{wedding['id']}/guests",
        json={"full_name": "Otro primo", "email": "PRIMO@example.com"},
        headers=headers,
    )
    other_wedding = await create_wedding(async_client, headers)
    elsewhere = await create_guest(
        async_client, headers, other_wedding["id"], email="primo@example.com"
    )

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "guest_email_taken"
    assert elsewhere["wedding_id"] == other_wedding["id"]


@pytest.mark.asyncio
async def test_create_guest_validates_party_size(async_client: AsyncClient) -> None:
    """Party sizes must be positive."""
    headers, wedding = await _wedding(async_client)

    response = await async_client.post(
        f"/api/v1/weddings/{wedding['id']}/guests",
        json={"full_name": "Nadie", "party_size": 0},
        headers=headers,
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_guests_filters(async_client: AsyncClient) -> None:
    """Listings filter by RSVP status and by name or email."""
    headers, wedding = await _wedding(async_client)
    base = f"/api/v1/weddings/{wedding['id']}/guests"
    marta = await create_guest(async_client, headers, wedding["id"])
    await create_guest(
        async_client, headers, wedding["id"], full_name="Jorge Pérez", email="jorge@example.com"
    )
    await async_client.post(
        f"{base}/{marta['id']}/rsvp", json={"rsvp_status": "declined"}, headers=headers
    )

    declined = await async_client.get(base, params={"rsvp_status": "declined"}, headers=headers)
    by_email = await async_client.get(base, params={"q": "JORGE@"}, headers=headers)
    everyone = await async_client.get(base, params={"include_total": True}, headers=headers)

    assert [item["full_name"] for item in declined.json()["items"]] == ["Marta Gómez"]
    assert [item["full_name"] for item in by_email.json()["items"]] == ["Jorge Pérez"]
    assert everyone.json()["total"] == 2
    assert [item["full_name"] for item in everyone.json()["items"]] == [
        "Jorge Pérez",
        "Marta Gómez",
    ]


@pytest.mark.asyncio
async def test_update_guest(async_client: AsyncClient) -> None:
    """Updates change supplied fields and can clear optional ones."""
    headers, wedding = await _wedding(async_client)
    guest = await create_guest(async_client, headers, wedding["id"], notes="Mesa 4")

    response = await async_client.patch(
        f"/api/v1/weddings/{wedding['id']}/guests/{guest['id']}",
        json={"full_name": " Marta G. ", "party_size": 4, "notes": None},
        headers=headers,
    )

    assert response.status_code == 200, response.text
    payload = response.json()
    assert payload["full_name"] == "Marta G."
    assert payload["party_size"] == 4
    assert payload["notes"] is None
    assert payload["invite_code"] == guest["invite_code"]


@pytest.mark.asyncio
async def test_party_size_cannot_drop_below_confirmed_seats(async_client: AsyncClient) -> None:
    """Shrinking a party below its confirmed head count is a conflict."""
    headers, wedding = await _wedding(async_client)
    guest = await create_guest(async_client, headers, wedding["id"], party_size=4)
    url = f"/api/v1/weddings/{wedding['id']}/guests/{guest['id']}"
    await async_client.post(
        f"{url}/rsvp", json={"rsvp_status": "attending", "attending_count": 3}, headers=headers
    )

    shrink = await async_client.patch(url, json={"party_size": 2}, headers=headers)
    empty = await async_client.patch(url, json={}, headers=headers)

    assert shrink.status_code == 409
    assert shrink.json()["detail"]["error"] == "party_size_below_attending"
    assert empty.status_code == 422


@pytest.mark.asyncio
async def test_owner_records_and_resets_rsvp(async_client: AsyncClient) -> None:
    """Owners may answer for a guest and reset the answer to pending."""
    headers, wedding = await _wedding(async_client)
    guest = await create_guest(async_client, headers, wedding["id"], party_size=3)
    url = f"/api/v1/weddings/{wedding['id']}/guests/{guest['id']}/rsvp"

    attending = await async_client.post(
        url,
        json={"rsvp_status": "attending", "dietary_notes": "Sin gluten"},
        headers=headers,
    )
    too_many = await async_client.post(
        url, json={"rsvp_status": "attending", "attending_count": 5}, headers=headers
    )
    reset = await async_client.post(url, json={"rsvp_status": "pending"}, headers=headers)

    assert attending.status_code == 200
    assert attending.json()["attending_count"] == 3
    assert attending.json()["responded_at"] is not None
    assert too_many.status_code == 422
    assert reset.json()["rsvp_status"] == "pending"
    assert reset.json()["attending_count"] is None
    assert reset.json()["responded_at"] is None
    assert reset.json()["dietary_notes"] == "Sin gluten"


@pytest.mark.asyncio
async def test_rotate_invite_code(async_client: AsyncClient) -> None:
    """Rotating the code invalidates the previous invitation link."""
    headers, wedding = await _wedding(async_client)
    await async_client.post(f"/api/v1/weddings/{wedding['id']}/publish", headers=headers)
    guest = await create_guest(async_client, headers, wedding["id"])

    rotated = await async_client.post(
        f"/api/v1/weddings/{wedding['id']}/guests/{guest['id']}/invite-code", headers=headers
    )
    old_link = await async_client.get(
        f"/api/v1/public/es/boda/{wedding['slug']}/invitations/{guest['invite_code']}"
    )

    assert rotated.status_code == 200
    assert rotated.json()["invite_code"] != guest["invite_code"]
    assert old_link.status_code == 404


@pytest.mark.asyncio
async def test_delete_guest(async_client: AsyncClient) -> None:
    """Deleted guests disappear from the wedding."""
    headers, wedding = await _wedding(async_client)
    guest = await create_guest(async_client, headers, wedding["id"])
    url = f"/api/v1/weddings/{wedding['id']}/guests/{guest['id']}"

    deleted = await async_client.delete(url, headers=headers)
    gone = await async_client.get(url, headers=headers)
    unknown = await async_client.get(
        f"/api/v1/weddings/{wedding['id']}/guests/{uuid4()}", headers=headers
    )

    assert deleted.status_code == 204
    assert gone.status_code == 404
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_guests_of_other_weddings_are_hidden(async_client: AsyncClient) -> None:
    """Guests are only reachable through their own owner's wedding."""
    headers, wedding = await _wedding(async_client)
    guest = await create_guest(async_client, headers, wedding["id"])
    stranger = await owner_headers(async_client)
    stranger_wedding = await create_wedding(async_client, stranger)

    foreign_list = await async_client.get(
        f"/api/v1/weddings/{wedding['id']}/guests", headers=stranger
    )
    wrong_parent = await async_client.get(
        f"/api/v1/weddings/{stranger_wedding['id']}/guests/{guest['id']}", headers=stranger
    )

    assert foreign_list.status_code == 404
    assert wrong_parent.status_code == 404
