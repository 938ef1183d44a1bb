"""Query helpers for working with ``User`` records."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.models import User, canonicalise_email


class UsersRepository:
    """Persistence helpers for organiser accounts."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: UUID) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email_canonical == canonicalise_email(email))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        display_name: str | None = None,
        is_active: bool = True,
    ) -> User:
        user = User(
            email=email,
            password_hash=password_hash,
            display_name=display_name,
            is_active=is_active,
            failed_login_count=0,
        )
        self._session.add(user)
        await self._session.flush()
        await self._session.refresh(user)
        return user


__all__ = ["UsersRepository"]
