"""Query helpers for ``Wedding`` records."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from boda_api.models import Contribution, ContributionStatus, Guest, RsvpStatus, Wedding


class WeddingsRepository:
    """Persistence helpers for weddings and their aggregate counters."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, wedding_id: UUID) -> Wedding | None:
        return await self._session.get(Wedding, wedding_id)

    async def get_for_owner(self, wedding_id: UUID, owner_id: UUID) -> Wedding | None:
        stmt = select(Wedding).where(Wedding.id == wedding_id, Wedding.owner_id == owner_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Wedding | None:
        result = await self._session.execute(select(Wedding).where(Wedding.slug == slug))
        return result.scalar_one_or_none()

    def owned_by(self, owner_id: UUID) -> Select:
        return select(Wedding).where(Wedding.owner_id == owner_id)

    async def slug_exists(self, slug: str, *, exclude_id: UUID | None = None) -> bool:
        stmt = select(Wedding.id).where(Wedding.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Wedding.id != exclude_id)
        result = await self._session.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def slugs_with_prefix(self, prefix: str) -> set[str]:
        stmt = select(Wedding.slug).where(
            (Wedding.slug == prefix) | Wedding.slug.like(f"{prefix}-%")
        )
        result = await self._session.execute(stmt)
        return set(result.scalars().all())

    async def add(self, wedding: Wedding) -> Wedding:
        self._session.add(wedding)
        await self._session.flush()
        await self._session.refresh(wedding)
        return wedding

    async def delete(self, wedding: Wedding) -> None:
        await self._session.delete(wedding)
        await self._session.flush()

    async def guest_totals(self, wedding_id: UUID) -> dict[str, int]:
        stmt = select(
            func.count(Guest.id),
            func.sum(case((Guest.rsvp_status == RsvpStatus.PENDING, 1), else_=0)),
            func.sum(case((Guest.rsvp_status == RsvpStatus.ATTENDING, 1), else_=0)),
            func.sum(case((Guest.rsvp_status == RsvpStatus.DECLINED, 1), else_=0)),
            func.sum(Guest.party_size),
            func.sum(
                case(
                    (Guest.rsvp_status == RsvpStatus.ATTENDING, Guest.attending_count),
                    else_=0,
                )
            ),
        ).where(Guest.wedding_id == wedding_id)
        row = (await self._session.execute(stmt)).one()
        keys = ("invited", "pending", "attending", "declined", "seats_offered", "seats_confirmed")
        return {key: int(value or 0) for key, value in zip(keys, row, strict=True)}

    async def contribution_totals(self, wedding_id: UUID) -> tuple[int, Decimal, int]:
        stmt = select(
            func.sum(case((Contribution.status == ContributionStatus.APPROVED, 1), else_=0)),
            func.sum(
                case(
                    (Contribution.status == ContributionStatus.APPROVED, Contribution.amount),
                    else_=0,
                )
            ),
            func.sum(
                case(
                    (
                        Contribution.status.in_(
                            [ContributionStatus.PENDING, ContributionStatus.IN_PROCESS]
                        ),
                        1,
                    ),
                    else_=0,
                )
            ),
        ).where(Contribution.wedding_id == wedding_id)
        approved_count, approved_amount, pending_count = (await self._session.execute(stmt)).one()
        amount = Decimal(str(approved_amount or 0)).quantize(Decimal("0.01"))
        return int(approved_count or 0), amount, int(pending_count or 0)


__all__ = ["WeddingsRepository"]
