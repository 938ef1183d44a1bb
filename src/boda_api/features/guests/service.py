"""Business logic for a wedding's guest list."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.common.ids import generate_invite_code
from boda_api.common.logging import log_context
from boda_api.common.pagination import paginate_sql
from boda_api.common.time import utc_now
from boda_api.features.weddings.service import load_owned_wedding, public_url_for
from boda_api.models import Guest, RsvpStatus, User, Wedding
from boda_api.settings import Settings

from .repository import GuestsRepository
from .rsvp import RsvpError, apply_rsvp
from .schemas import GuestCreate, GuestOut, GuestPage, GuestRsvpUpdate, GuestUpdate

logger = logging.getLogger(__name__)


def invite_url_for(wedding: Wedding, guest: Guest, settings: Settings) -> str:
    return f"{public_url_for(wedding, settings)}?invite={guest.invite_code}"


def _duplicate_email() -> HTTPException:
    return HTTPException(
        status.HTTP_409_CONFLICT,
        detail={
            "error": "guest_email_taken",
            "message": "Another guest of this wedding already uses that email.",
        },
    )


class GuestsService:
    """Guest CRUD and owner-side RSVP management."""

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._repo = GuestsRepository(session)

    def to_out(self, wedding: Wedding, guest: Guest) -> GuestOut:
        return GuestOut(
            id=guest.id,
            wedding_id=guest.wedding_id,
            full_name=guest.full_name,
            email=guest.email,
            phone=guest.phone,
            notes=guest.notes,
            party_size=guest.party_size,
            attending_count=guest.attending_count,
            rsvp_status=guest.rsvp_status,
            responded_at=guest.responded_at,
            dietary_notes=guest.dietary_notes,
            message=guest.message,
            invite_code=guest.invite_code,
            invite_url=invite_url_for(wedding, guest, self._settings),
            created_at=guest.created_at,
            updated_at=guest.updated_at,
        )

    async def _owned(self, owner: User, wedding_id: UUID) -> Wedding:
        return await load_owned_wedding(self._session, wedding_id=wedding_id, owner_id=owner.id)

    async def _guest(self, wedding: Wedding, guest_id: UUID) -> Guest:
        guest = await self._repo.get_for_wedding(wedding.id, guest_id)
        if guest is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Guest {guest_id} not found")
        return guest

    async def _save(self, guest: Guest) -> None:
        try:
            await self._repo.add(guest)
        except IntegrityError as exc:
            raise _duplicate_email() from exc

    # ---- Queries ----

    async def list_guests(
        self,
        *,
        owner: User,
        wedding_id: UUID,
        page: int,
        page_size: int,
        include_total: bool = False,
        rsvp_status: RsvpStatus | None = None,
        q: str | None = None,
    ) -> GuestPage:
        wedding = await self._owned(owner, wedding_id)
        stmt = self._repo.list_statement(
            wedding.id,
            rsvp_status=RsvpStatus(rsvp_status) if rsvp_status else None,
            q=(q or "").strip() or None,
        )
        result = await paginate_sql(
            self._session,
            stmt,
            page=page,
            page_size=page_size,
            order_by=(Guest.full_name.asc(), Guest.id.asc()),
            include_total=include_total,
        )
        return GuestPage(
            items=[self.to_out(wedding, guest) for guest in result.items],
            page=result.page,
            page_size=result.page_size,
            has_next=result.has_next,
            has_previous=result.has_previous,
            total=result.total,
        )

    async def get_guest(self, *, owner: User, wedding_id: UUID, guest_id: UUID) -> GuestOut:
        wedding = await self._owned(owner, wedding_id)
        return self.to_out(wedding, await self._guest(wedding, guest_id))

    # ---- Mutations ----

    async def create_guest(
        self, *, owner: User, wedding_id: UUID, payload: GuestCreate
    ) -> GuestOut:
        wedding = await self._owned(owner, wedding_id)
        email = str(payload.email) if payload.email else None
        if email and await self._repo.email_taken(wedding.id, email.lower()):
            raise _duplicate_email()

        guest = Guest(
            wedding_id=wedding.id,
            full_name=payload.full_name,
            email=email,
            phone=payload.phone,
            notes=payload.notes,
            party_size=payload.party_size,
            rsvp_status=RsvpStatus.PENDING,
        )
        await self._save(guest)
        logger.info(
            "guest.create.success",
            extra=log_context(wedding_id=str(wedding.id), guest_id=str(guest.id)),
        )
        return self.to_out(wedding, guest)

    async def update_guest(
        self,
        *,
        owner: User,
        wedding_id: UUID,
        guest_id: UUID,
        payload: GuestUpdate,
    ) -> GuestOut:
        wedding = await self._owned(owner, wedding_id)
        guest = await self._guest(wedding, guest_id)
        updates: dict[str, Any] = payload.model_dump(exclude_unset=True)
        if not updates:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="No fields provided for update.",
            )
        if "full_name" in updates and not updates["full_name"]:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="full_name cannot be cleared.",
            )
        if "party_size" in updates:
            party_size = updates["party_size"]
            if party_size is None:
                raise HTTPException(
                    status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="party_size cannot be cleared.",
                )
            if guest.attending_count is not None and guest.attending_count > party_size:
                raise HTTPException(
                    status.HTTP_409_CONFLICT,
                    detail={
                        "error": "party_size_below_attending",
                        "message": "Guest already confirmed more seats than the new party size.",
                    },
                )
        if updates.get("email"):
            updates["email"] = str(updates["email"])
            if await self._repo.email_taken(
                wedding.id, updates["email"].lower(), exclude_id=guest.id
            ):
                raise _duplicate_email()

        for field, value in updates.items():
            if field == "full_name":
                value = value.strip()
            setattr(guest, field, value)

        await self._save(guest)
        logger.info(
            "guest.update.success",
            extra=log_context(
                wedding_id=str(wedding.id),
                guest_id=str(guest.id),
                fields=",".join(sorted(updates)),
            ),
        )
        return self.to_out(wedding, guest)

    async def delete_guest(self, *, owner: User, wedding_id: UUID, guest_id: UUID) -> None:
        wedding = await self._owned(owner, wedding_id)
        guest = await self._guest(wedding, guest_id)
        await self._repo.delete(guest)
        logger.info(
            "guest.delete.success",
            extra=log_context(wedding_id=str(wedding.id), guest_id=str(guest_id)),
        )

    async def record_rsvp(
        self,
        *,
        owner: User,
        wedding_id: UUID,
        guest_id: UUID,
        payload: GuestRsvpUpdate,
    ) -> GuestOut:
        """Set any RSVP state on behalf of a guest, ignoring the deadline."""

        wedding = await self._owned(owner, wedding_id)
        guest = await self._guest(wedding, guest_id)
        try:
            changed = apply_rsvp(
                guest,
                rsvp_status=RsvpStatus(payload.rsvp_status),
                attending_count=payload.attending_count,
                dietary_notes=payload.dietary_notes,
                message=payload.message,
                now=utc_now(),
            )
        except RsvpError as exc:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"error": exc.code, "message": str(exc)},
            ) from exc

        if changed:
            await self._save(guest)
        logger.info(
            "guest.rsvp.owner_update",
            extra=log_context(
                wedding_id=str(wedding.id),
                guest_id=str(guest.id),
                rsvp_status=str(RsvpStatus(guest.rsvp_status).value),
                changed=changed,
            ),
        )
        return self.to_out(wedding, guest)

    async def rotate_invite_code(
        self, *, owner: User, wedding_id: UUID, guest_id: UUID
    ) -> GuestOut:
        wedding = await self._owned(owner, wedding_id)
        guest = await self._guest(wedding, guest_id)
        guest.invite_code = generate_invite_code()
        await self._save(guest)
        logger.info(
            "guest.invite_code.rotate",
            extra=log_context(wedding_id=str(wedding.id), guest_id=str(guest.id)),
        )
        return self.to_out(wedding, guest)


__all__ = ["GuestsService", "invite_url_for"]
