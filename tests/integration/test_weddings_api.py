"""Wedding management endpoints."""

from __future__ import annotations

from uuid import uuid4

import pytest
from httpx import AsyncClient

from tests.utils import create_guest, create_wedding, owner_headers


@pytest.mark.asyncio
async def test_create_wedding_generates_slug_and_public_url(async_client: AsyncClient) -> None:
    """Slugs derive from the couple and weddings start unpublished."""
    headers = await owner_headers(async_client)

    wedding = await create_wedding(async_client, headers)

    assert wedding["slug"] == "ana-y-luis"
    assert wedding["is_published"] is False
    assert wedding["locale"] == "es"
    assert wedding["currency"] == "ARS"
    assert wedding["public_url"] == "http://frontend.test/es/boda/ana-y-luis"


@pytest.mark.asyncio
async def test_generated_slugs_get_numeric_suffixes(async_client: AsyncClient) -> None:
    """A second couple with the same names gets '-2'."""
    first = await create_wedding(async_client, await owner_headers(async_client))
    second = await create_wedding(async_client, await owner_headers(async_client))

    assert first["slug"] == "ana-y-luis"
    assert second["slug"] == "ana-y-luis-2"


@pytest.mark.asyncio
async def test_long_generated_slugs_keep_counting(async_client: AsyncClient) -> None:
    """Suffixes on a trimmed slug still advance past earlier couples."""
    names = {"partner_one_name": "A" * 60, "partner_two_name": "B" * 60}

    slugs = [
        (await create_wedding(async_client, await owner_headers(async_client), **names))["slug"]
        for _ in range(3)
    ]

    base = f"{'a' * 60}-y-{'b' * 35}"
    assert slugs == [base, f"{base[:98]}-2", f"{base[:98]}-3"]
    assert all(len(slug) == 100 for slug in slugs)


@pytest.mark.asyncio
async def test_english_wedding_uses_english_conjunction(async_client: AsyncClient) -> None:
    """Locale drives the slug conjunction and the public URL prefix."""
    headers = await owner_headers(async_client)

    wedding = await create_wedding(
        async_client, headers, partner_one_name="Emma", partner_two_name="Noah", locale="EN"
    )

    assert wedding["slug"] == "emma-and-noah"
    assert wedding["public_url"].endswith("/en/boda/emma-and-noah")


@pytest.mark.asyncio
async def test_explicit_slug_conflicts_and_validation(async_client: AsyncClient) -> None:
    """Explicit slugs must be valid and unused."""
    headers = await owner_headers(async_client)
    await create_wedding(async_client, headers, slug="nuestra-boda")

    taken = await async_client.post(
        "/api/v1/weddings",
        json={"partner_one_name": "A", "partner_two_name": "B", "slug": "nuestra-boda"},
        headers=headers,
    )
    invalid = await async_client.post(
        "/api/v1/weddings",
        json={"partner_one_name": "A", "partner_two_name": "B", "slug": "admin"},
        headers=headers,
    )

    assert taken.status_code == 409
    assert taken.json()["detail"]["error"] == "slug_taken"
    assert invalid.status_code == 422
    assert invalid.json()["detail"]["error"] == "invalid_slug"


@pytest.mark.asyncio
async def test_create_rejects_bad_locale_and_deadline(async_client: AsyncClient) -> None:
    """Unsupported locales and deadlines after the event are refused."""
    headers = await owner_headers(async_client)

    bad_locale = await async_client.post(
        "/api/v1/weddings",
        json={"partner_one_name": "A", "partner_two_name": "B", "locale": "fr"},
        headers=headers,
    )
    bad_deadline = await async_client.post(
        "/api/v1/weddings",
        json={
            "partner_one_name": "A",
            "partner_two_name": "B",
            "event_date": "2030-01-10",
            "rsvp_deadline": "2030-02-01",
        },
        headers=headers,
    )

    assert bad_locale.status_code == 422
    assert bad_locale.json()["detail"]["error"] == "unsupported_locale"
    assert bad_deadline.status_code == 422


@pytest.mark.asyncio
async def test_slug_availability(async_client: AsyncClient) -> None:
    """Availability checks normalise input and suggest alternatives."""
    headers = await owner_headers(async_client)
    await create_wedding(async_client, headers)

    taken = await async_client.get(
        "/api/v1/weddings/slug-availability", params={"slug": "Ana y Luis"}, headers=headers
    )
    free = await async_client.get(
        "/api/v1/weddings/slug-availability", params={"slug": "otra-boda"}, headers=headers
    )
    invalid = await async_client.get(
        "/api/v1/weddings/slug-availability", params={"slug": "!!"}, headers=headers
    )

    assert taken.json() == {"slug": "ana-y-luis", "available": False, "suggestion": "ana-y-luis-2"}
    assert free.json()["available"] is True
    assert invalid.json()["available"] is False


@pytest.mark.asyncio
async def test_list_weddings_only_returns_own(async_client: AsyncClient) -> None:
    """Listings are scoped to the owner and paginated."""
    mine = await owner_headers(async_client)
    theirs = await owner_headers(async_client)
    await create_wedding(async_client, mine, partner_one_name="Uno", partner_two_name="Dos")
    await create_wedding(async_client, mine, partner_one_name="Tres", partner_two_name="Cuatro")
    await create_wedding(async_client, theirs)

    response = await async_client.get(
        "/api/v1/weddings", params={"page_size": 1, "include_total": True}, headers=mine
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 2
    assert payload["has_next"] is True
    assert len(payload["items"]) == 1


@pytest.mark.asyncio
async def test_other_users_wedding_is_not_found(async_client: AsyncClient) -> None:
    """Foreign weddings are reported as missing, not forbidden."""
    owner = await owner_headers(async_client)
    stranger = await owner_headers(async_client)
    wedding = await create_wedding(async_client, owner)

    read = await async_client.get(f"/api/v1/weddings/{wedding['id']}", headers=stranger)
    patch = await async_client.patch(
        f"/api/v1/weddings/{wedding['id']}", json={"title": "Mine now"}, headers=stranger
    )
    missing = await async_client.get(f"/api/v1/weddings/{uuid4()}", headers=owner)

    assert read.status_code == 404
    assert patch.status_code == 404
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_update_wedding(async_client: AsyncClient) -> None:
    """Partial updates change only the supplied fields."""
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)

    response = await async_client.patch(
        f"/api/v1/weddings/{wedding['id']}",
        json={"title": "  Nuestra boda  ", "slug": "ana-luis-2030", "rsvp_deadline": "2030-10-01"},
        headers=headers,
    )

    assert response.status_code == 200, response.text
    payload = response.json()
    assert payload["title"] == "Nuestra boda"
    assert payload["slug"] == "ana-luis-2030"
    assert payload["rsvp_deadline"] == "2030-10-01"
    assert payload["venue_name"] == wedding["venue_name"]


@pytest.mark.asyncio
async def test_update_wedding_rejects_invalid_changes(async_client: AsyncClient) -> None:
    """Empty payloads, cleared names and late deadlines are refused."""
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)
    url = f"/api/v1/weddings/{wedding['id']}"

    empty = await async_client.patch(url, json={}, headers=headers)
    cleared = await async_client.patch(url, json={"partner_one_name": None}, headers=headers)
    late = await async_client.patch(url, json={"rsvp_deadline": "2031-01-01"}, headers=headers)

    assert empty.status_code == 422
    assert cleared.status_code == 422
    assert late.status_code == 422
    assert late.json()["detail"]["error"] == "invalid_rsvp_deadline"


@pytest.mark.asyncio
async def test_publish_and_unpublish(async_client: AsyncClient) -> None:
    """Publishing toggles public visibility."""
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)

    published = await async_client.post(
        f"/api/v1/weddings/{wedding['id']}/publish", headers=headers
    )
    page = await async_client.get(f"/api/v1/public/es/boda/{wedding['slug']}")
    unpublished = await async_client.post(
        f"/api/v1/weddings/{wedding['id']}/unpublish", headers=headers
    )
    hidden = await async_client.get(f"/api/v1/public/es/boda/{wedding['slug']}")

    assert published.json()["is_published"] is True
    assert page.status_code == 200
    assert unpublished.json()["is_published"] is False
    assert hidden.status_code == 404


@pytest.mark.asyncio
async def test_summary_counts_guests(async_client: AsyncClient) -> None:
    """The dashboard summary aggregates RSVPs and seats."""
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)
    attending = await create_guest(async_client, headers, wedding["id"], party_size=3)
    await create_guest(async_client, headers, wedding["id"], full_name="Jorge", party_size=1)
    await async_client.post(
        f"/api/v1/weddings/{wedding['id']}/guests/{attending['id']}/rsvp",
        json={"rsvp_status": "attending", "attending_count": 2},
        headers=headers,
    )

    response = await async_client.get(
        f"/api/v1/weddings/{wedding['id']}/summary", headers=headers
    )

    assert response.status_code == 200
    summary = response.json()
    assert summary["guests"] == {
        "invited": 2,
        "pending": 1,
        "attending": 1,
        "declined": 0,
        "seats_offered": 4,
        "seats_confirmed": 2,
    }
    assert summary["contributions"]["approved_count"] == 0
    assert summary["contributions"]["currency"] == "ARS"


@pytest.mark.asyncio
async def test_delete_wedding_removes_guests(async_client: AsyncClient) -> None:
    """Deleting a wedding cascades to its guest list."""
    headers = await owner_headers(async_client)
    wedding = await create_wedding(async_client, headers)
    await create_guest(async_client, headers, wedding["id"])

    deleted = await async_client.delete(f"/api/v1/weddings/{wedding['id']}", headers=headers)
    gone = await async_client.get(f"/api/v1/weddings/{wedding['id']}", headers=headers)

    assert deleted.status_code == 204
    assert gone.status_code == 404
