"""Demo data for local development."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.common.logging import log_context
from boda_api.common.time import utc_today
from boda_api.core.security.hashing import hash_password
from boda_api.features.guests.schemas import GuestCreate
from boda_api.features.guests.service import GuestsService
from boda_api.features.users.repository import UsersRepository
from boda_api.features.weddings.repository import WeddingsRepository
from boda_api.features.weddings.schemas import WeddingCreate
from boda_api.features.weddings.service import WeddingsService
from boda_api.settings import Settings

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo-password"
DEMO_SLUG = "ana-y-luis"

_DEMO_GUESTS: tuple[tuple[str, str | None, int], ...] = (
    ("Marta Gómez", "marta@example.com", 2),
    ("Jorge Pérez", "jorge@example.com", 1),
    ("Familia Rodríguez", None, 4),
)


@dataclass(slots=True)
class SeedResult:
    user_id: UUID
    wedding_id: UUID | None
    created: bool
    guest_ids: list[UUID] = field(default_factory=list)


async def seed_demo(
    session: AsyncSession,
    settings: Settings,
    *,
    email: str = DEMO_EMAIL,
    password: str = DEMO_PASSWORD,
) -> SeedResult:
    """Create a demo couple with a published wedding and a few guests.

    Running it again is a no-op once the demo account exists.
    """

    users = UsersRepository(session)
    existing = await users.get_by_email(email)
    if existing is not None:
        wedding = await WeddingsRepository(session).get_by_slug(DEMO_SLUG)
        logger.info("seed.skipped", extra=log_context(user_id=str(existing.id)))
        return SeedResult(
            user_id=existing.id,
            wedding_id=wedding.id if wedding is not None else None,
            created=False,
        )

    user = await users.create(
        email=email,
        password_hash=hash_password(password),
        display_name="Ana & Luis",
    )

    weddings = WeddingsService(session=session, settings=settings)
    event_date = utc_today() + timedelta(days=120)
    wedding = await weddings.create_wedding(
        owner=user,
        payload=WeddingCreate(
            partner_one_name="Ana",
            partner_two_name="Luis",
            event_date=event_date,
            rsvp_deadline=event_date - timedelta(days=30),
            venue_name="Estancia La Candelaria",
            venue_address="Ruta 205 km 112, Lobos, Buenos Aires",
            description="¡Nos casamos! Queremos compartir este día con vos.",
        ),
    )
    await weddings.set_published(owner=user, wedding_id=wedding.id, published=True)

    guests = GuestsService(session=session, settings=settings)
    guest_ids: list[UUID] = []
    for full_name, guest_email, party_size in _DEMO_GUESTS:
        guest = await guests.create_guest(
            owner=user,
            wedding_id=wedding.id,
            payload=GuestCreate(full_name=full_name, email=guest_email, party_size=party_size),
        )
        guest_ids.append(guest.id)

    logger.info(
        "seed.complete",
        extra=log_context(
            user_id=str(user.id), wedding_id=str(wedding.id), guest_count=len(guest_ids)
        ),
    )
    return SeedResult(user_id=user.id, wedding_id=wedding.id, created=True, guest_ids=guest_ids)


__all__ = ["DEMO_EMAIL", "DEMO_PASSWORD", "DEMO_SLUG", "SeedResult", "seed_demo"]
