"""Business logic for the signed-in account."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.common.logging import log_context
from boda_api.core.security.hashing import hash_password, verify_password
from boda_api.models import User

from .schemas import PasswordChangeRequest, UserProfile, UserProfileUpdate

logger = logging.getLogger(__name__)


class UsersService:
    """Read and update the authenticated user's own profile."""

    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session

    async def get_profile(self, *, user: User) -> UserProfile:
        logger.debug("user.profile.get", extra=log_context(user_id=str(user.id)))
        return UserProfile.model_validate(user)

    async def update_profile(self, *, user: User, payload: UserProfileUpdate) -> UserProfile:
        updates = payload.model_dump(exclude_unset=True)
        if not updates:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="No fields provided for update.",
            )

        if "display_name" in updates:
            user.display_name = updates["display_name"]

        await self._session.flush()
        await self._session.refresh(user)
        logger.info(
            "user.profile.update.success",
            extra=log_context(user_id=str(user.id), fields=",".join(sorted(updates))),
        )
        return UserProfile.model_validate(user)

    async def change_password(self, *, user: User, payload: PasswordChangeRequest) -> None:
        if not verify_password(payload.current_password.get_secret_value(), user.password_hash):
            logger.warning(
                "user.password.change.invalid_current",
                extra=log_context(user_id=str(user.id)),
            )
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "invalid_current_password",
                    "message": "Current password is incorrect.",
                },
            )

        user.password_hash = hash_password(payload.new_password.get_secret_value())
        await self._session.flush()
        logger.info("user.password.change.success", extra=log_context(user_id=str(user.id)))


__all__ = ["UsersService"]
