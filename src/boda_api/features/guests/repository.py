"""Query helpers for ``Guest`` records."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from boda_api.models import Guest, RsvpStatus


class GuestsRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_wedding(self, wedding_id: UUID, guest_id: UUID) -> Guest | None:
        stmt = select(Guest).where(Guest.id == guest_id, Guest.wedding_id == wedding_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_invite_code(self, wedding_id: UUID, invite_code: str) -> Guest | None:
        stmt = select(Guest).where(
            Guest.wedding_id == wedding_id,
            Guest.invite_code == invite_code,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def list_statement(
        self,
        wedding_id: UUID,
        *,
        rsvp_status: RsvpStatus | None = None,
        q: str | None = None,
    ) -> Select:
        stmt = select(Guest).where(Guest.wedding_id == wedding_id)
        if rsvp_status is not None:
            stmt = stmt.where(Guest.rsvp_status == rsvp_status)
        if q:
            stmt = stmt.where(
                or_(
                    Guest.full_name.icontains(q, autoescape=True),
                    Guest.email_canonical.icontains(q.lower(), autoescape=True),
                )
            )
        return stmt

    async def email_taken(
        self, wedding_id: UUID, email_canonical: str, *, exclude_id: UUID | None = None
    ) -> bool:
        stmt = select(Guest.id).where(
            Guest.wedding_id == wedding_id,
            Guest.email_canonical == email_canonical,
        )
        if exclude_id is not None:
            stmt = stmt.where(Guest.id != exclude_id)
        result = await self._session.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def add(self, guest: Guest) -> Guest:
        self._session.add(guest)
        await self._session.flush()
        await self._session.refresh(guest)
        return guest

    async def delete(self, guest: Guest) -> None:
        await self._session.delete(guest)
        await self._session.flush()


__all__ = ["GuestsRepository"]
