"""Query helpers for ``Contribution`` records."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from boda_api.models import Contribution, ContributionStatus


class ContributionsRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_wedding(
        self, wedding_id: UUID, contribution_id: UUID
    ) -> Contribution | None:
        stmt = select(Contribution).where(
            Contribution.id == contribution_id,
            Contribution.wedding_id == wedding_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def list_statement(
        self, wedding_id: UUID, *, status: ContributionStatus | None = None
    ) -> Select:
        stmt = select(Contribution).where(Contribution.wedding_id == wedding_id)
        if status is not None:
            stmt = stmt.where(Contribution.status == status)
        return stmt

    async def add(self, contribution: Contribution) -> Contribution:
        self._session.add(contribution)
        await self._session.flush()
        await self._session.refresh(contribution)
        return contribution


__all__ = ["ContributionsRepository"]
