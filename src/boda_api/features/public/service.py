"""Public read model for wedding pages, invitations and RSVPs."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.common.logging import log_context
from boda_api.common.time import utc_now, utc_today
from boda_api.features.guests.repository import GuestsRepository
from boda_api.features.guests.rsvp import RsvpError, apply_rsvp, rsvp_is_open
from boda_api.features.payments.config_service import resolve_credentials
from boda_api.features.weddings.repository import WeddingsRepository
from boda_api.i18n import get_dictionary, resolve_locale, translate
from boda_api.models import Guest, RsvpStatus, Wedding
from boda_api.settings import Settings

from .schemas import PublicInvitation, PublicRsvpResult, PublicRsvpSubmission, PublicWeddingPage

logger = logging.getLogger(__name__)

_PAGE_PREFIXES = ("page.", "contribution.")
_RSVP_PREFIXES = ("rsvp.",)


class PublicWeddingService:
    """Anonymous access to published weddings."""

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._weddings = WeddingsRepository(session)
        self._guests = GuestsRepository(session)

    def locale_for(self, lang: str | None) -> str:
        return resolve_locale(lang, self._settings)

    def _translate(self, locale: str, key: str, **params: Any) -> str:
        return translate(locale, key, default_locale=self._settings.default_locale, **params)

    def _labels(self, locale: str, prefixes: tuple[str, ...], **params: Any) -> dict[str, str]:
        labels: dict[str, str] = {}
        for key in sorted(get_dictionary(locale) or get_dictionary(self._settings.default_locale)):
            if not key.startswith(prefixes):
                continue
            if key == "page.rsvp_deadline" and not params.get("date"):
                continue
            labels[key] = self._translate(locale, key, **params)
        return labels

    async def get_published_wedding(self, slug: str) -> Wedding:
        wedding = await self._weddings.get_by_slug(slug.strip().lower())
        if wedding is None or not wedding.is_published:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Wedding not found")
        return wedding

    async def _invited_guest(self, wedding: Wedding, invite_code: str) -> Guest:
        guest = await self._guests.get_by_invite_code(wedding.id, invite_code.strip())
        if guest is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Invitation not found")
        return guest

    async def page(self, *, lang: str, slug: str) -> PublicWeddingPage:
        locale = self.locale_for(lang)
        wedding = await self.get_published_wedding(slug)
        credentials = await resolve_credentials(self._session, wedding, self._settings)
        partners = f"{wedding.partner_one_name} & {wedding.partner_two_name}"

        logger.debug(
            "public.page.view",
            extra=log_context(wedding_id=str(wedding.id), locale=locale),
        )
        return PublicWeddingPage(
            locale=locale,
            slug=wedding.slug,
            title=wedding.title or self._translate(locale, "page.title", partners=partners),
            partner_one_name=wedding.partner_one_name,
            partner_two_name=wedding.partner_two_name,
            event_date=wedding.event_date,
            venue_name=wedding.venue_name,
            venue_address=wedding.venue_address,
            description=wedding.description,
            rsvp_deadline=wedding.rsvp_deadline,
            rsvp_open=rsvp_is_open(wedding, utc_today()),
            contributions_enabled=credentials is not None,
            currency=wedding.currency,
            min_contribution=credentials.min_amount if credentials is not None else None,
            payment_public_key=credentials.public_key if credentials is not None else None,
            labels=self._labels(
                locale,
                _PAGE_PREFIXES,
                partners=partners,
                date=wedding.rsvp_deadline.isoformat() if wedding.rsvp_deadline else None,
            ),
        )

    async def invitation(self, *, lang: str, slug: str, invite_code: str) -> PublicInvitation:
        locale = self.locale_for(lang)
        wedding = await self.get_published_wedding(slug)
        guest = await self._invited_guest(wedding, invite_code)
        return self._invitation_out(locale, wedding, guest)

    def _invitation_out(self, locale: str, wedding: Wedding, guest: Guest) -> PublicInvitation:
        return PublicInvitation(
            locale=locale,
            wedding_slug=wedding.slug,
            full_name=guest.full_name,
            party_size=guest.party_size,
            rsvp_status=guest.rsvp_status,
            attending_count=guest.attending_count,
            dietary_notes=guest.dietary_notes,
            message=guest.message,
            responded_at=guest.responded_at,
            rsvp_open=rsvp_is_open(wedding, utc_today()),
            rsvp_deadline=wedding.rsvp_deadline,
            labels=self._labels(
                locale, _RSVP_PREFIXES, name=guest.full_name, count=guest.party_size
            ),
        )

    async def submit_rsvp(
        self,
        *,
        lang: str,
        slug: str,
        invite_code: str,
        payload: PublicRsvpSubmission,
    ) -> PublicRsvpResult:
        locale = self.locale_for(lang)
        wedding = await self.get_published_wedding(slug)
        guest = await self._invited_guest(wedding, invite_code)

        if not rsvp_is_open(wedding, utc_today()):
            logger.info(
                "public.rsvp.closed",
                extra=log_context(wedding_id=str(wedding.id), guest_id=str(guest.id)),
            )
            raise HTTPException(
                status.HTTP_409_CONFLICT,
                detail={
                    "error": "rsvp_closed",
                    "message": self._translate(locale, "page.rsvp_closed"),
                },
            )

        rsvp_status = RsvpStatus(payload.response)
        try:
            changed = apply_rsvp(
                guest,
                rsvp_status=rsvp_status,
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
            await self._session.flush()
            await self._session.refresh(guest)

        logger.info(
            "public.rsvp.success",
            extra=log_context(
                wedding_id=str(wedding.id),
                guest_id=str(guest.id),
                rsvp_status=rsvp_status.value,
                attending_count=guest.attending_count,
                changed=changed,
            ),
        )
        confirmation_key = (
            "rsvp.thanks_attending"
            if rsvp_status is RsvpStatus.ATTENDING
            else "rsvp.thanks_declined"
        )
        return PublicRsvpResult(
            locale=locale,
            rsvp_status=guest.rsvp_status,
            attending_count=guest.attending_count,
            responded_at=guest.responded_at,
            confirmation=self._translate(locale, confirmation_key),
        )


__all__ = ["PublicWeddingService"]
