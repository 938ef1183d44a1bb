"""Business logic for managing weddings."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.common.logging import log_context
from boda_api.common.pagination import paginate_sql
from boda_api.models import User, Wedding
from boda_api.settings import Settings

from .repository import WeddingsRepository
from .schemas import (
    ContributionTotals,
    GuestTotals,
    SlugAvailability,
    WeddingCreate,
    WeddingOut,
    WeddingPage,
    WeddingSummary,
    WeddingUpdate,
)
from .slugs import is_valid_slug, slug_base_for_couple, slugify, with_suffix

logger = logging.getLogger(__name__)

_MAX_SLUG_ATTEMPTS = 1000


def wedding_not_found(wedding_id: UUID) -> HTTPException:
    return HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Wedding {wedding_id} not found")


async def load_owned_wedding(
    session: AsyncSession, *, wedding_id: UUID, owner_id: UUID
) -> Wedding:
    """Return the wedding when ``owner_id`` owns it, otherwise raise 404.

    Other users' weddings are reported as missing rather than forbidden.
    """

    wedding = await WeddingsRepository(session).get_for_owner(wedding_id, owner_id)
    if wedding is None:
        logger.warning(
            "wedding.access.not_found",
            extra=log_context(wedding_id=str(wedding_id), user_id=str(owner_id)),
        )
        raise wedding_not_found(wedding_id)
    return wedding


def public_url_for(wedding: Wedding, settings: Settings) -> str:
    """Absolute URL of the wedding page on the frontend (``/{lang}/boda/{slug}``)."""

    base = (settings.frontend_url or settings.server_public_url).rstrip("/")
    return f"{base}/{wedding.locale}/boda/{wedding.slug}"


class WeddingsService:
    """Create, update and inspect weddings owned by the signed-in user."""

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._repo = WeddingsRepository(session)

    # ---- Serialisation ----

    def to_out(self, wedding: Wedding) -> WeddingOut:
        return WeddingOut(
            id=wedding.id,
            owner_id=wedding.owner_id,
            slug=wedding.slug,
            partner_one_name=wedding.partner_one_name,
            partner_two_name=wedding.partner_two_name,
            title=wedding.title,
            event_date=wedding.event_date,
            venue_name=wedding.venue_name,
            venue_address=wedding.venue_address,
            description=wedding.description,
            locale=wedding.locale,
            currency=wedding.currency,
            rsvp_deadline=wedding.rsvp_deadline,
            is_published=wedding.is_published,
            public_url=public_url_for(wedding, self._settings),
            created_at=wedding.created_at,
            updated_at=wedding.updated_at,
        )

    # ---- Queries ----

    async def list_weddings(
        self,
        *,
        owner: User,
        page: int,
        page_size: int,
        include_total: bool = False,
    ) -> WeddingPage:
        result = await paginate_sql(
            self._session,
            self._repo.owned_by(owner.id),
            page=page,
            page_size=page_size,
            order_by=(Wedding.created_at.desc(), Wedding.id.desc()),
            include_total=include_total,
        )
        return WeddingPage(
            items=[self.to_out(wedding) for wedding in result.items],
            page=result.page,
            page_size=result.page_size,
            has_next=result.has_next,
            has_previous=result.has_previous,
            total=result.total,
        )

    async def get_wedding(self, *, owner: User, wedding_id: UUID) -> WeddingOut:
        wedding = await load_owned_wedding(self._session, wedding_id=wedding_id, owner_id=owner.id)
        return self.to_out(wedding)

    async def check_slug(self, slug: str) -> SlugAvailability:
        candidate = slugify(slug)
        if not is_valid_slug(candidate):
            return SlugAvailability(slug=candidate, available=False, suggestion=None)
        taken = await self._repo.slug_exists(candidate)
        suggestion = await self._unique_slug(candidate) if taken else None
        return SlugAvailability(slug=candidate, available=not taken, suggestion=suggestion)

    async def summary(self, *, owner: User, wedding_id: UUID) -> WeddingSummary:
        wedding = await load_owned_wedding(self._session, wedding_id=wedding_id, owner_id=owner.id)
        guest_totals = await self._repo.guest_totals(wedding.id)
        approved_count, approved_amount, pending_count = await self._repo.contribution_totals(
            wedding.id
        )
        return WeddingSummary(
            wedding_id=wedding.id,
            guests=GuestTotals(**guest_totals),
            contributions=ContributionTotals(
                approved_count=approved_count,
                approved_amount=approved_amount,
                pending_count=pending_count,
                currency=wedding.currency,
            ),
        )

    # ---- Mutations ----

    async def create_wedding(self, *, owner: User, payload: WeddingCreate) -> WeddingOut:
        locale = self._validate_locale(payload.locale) if payload.locale else None
        locale = locale or self._settings.default_locale

        if payload.slug is not None:
            slug = self._validate_explicit_slug(payload.slug)
            if await self._repo.slug_exists(slug):
                raise self._slug_taken(slug)
        else:
            slug = await self._unique_slug(
                slug_base_for_couple(
                    payload.partner_one_name, payload.partner_two_name, locale=locale
                )
            )

        wedding = Wedding(
            owner_id=owner.id,
            slug=slug,
            partner_one_name=payload.partner_one_name.strip(),
            partner_two_name=payload.partner_two_name.strip(),
            title=payload.title,
            event_date=payload.event_date,
            venue_name=payload.venue_name,
            venue_address=payload.venue_address,
            description=payload.description,
            locale=locale,
            currency=payload.currency or self._settings.default_currency,
            rsvp_deadline=payload.rsvp_deadline,
            is_published=False,
        )
        await self._persist(wedding, slug=slug)

        logger.info(
            "wedding.create.success",
            extra=log_context(wedding_id=str(wedding.id), user_id=str(owner.id), slug=slug),
        )
        return self.to_out(wedding)

    async def update_wedding(
        self, *, owner: User, wedding_id: UUID, payload: WeddingUpdate
    ) -> WeddingOut:
        wedding = await load_owned_wedding(self._session, wedding_id=wedding_id, owner_id=owner.id)
        updates: dict[str, Any] = payload.model_dump(exclude_unset=True)
        if not updates:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="No fields provided for update.",
            )

        for required in ("partner_one_name", "partner_two_name", "locale", "currency"):
            if required in updates and updates[required] is None:
                raise HTTPException(
                    status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail=f"{required} cannot be cleared.",
                )

        if "slug" in updates:
            slug = self._validate_explicit_slug(updates["slug"])
            if slug != wedding.slug and await self._repo.slug_exists(slug, exclude_id=wedding.id):
                raise self._slug_taken(slug)
            updates["slug"] = slug
        if "locale" in updates:
            updates["locale"] = self._validate_locale(updates["locale"])

        event_date = updates.get("event_date", wedding.event_date)
        rsvp_deadline = updates.get("rsvp_deadline", wedding.rsvp_deadline)
        if event_date and rsvp_deadline and rsvp_deadline > event_date:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={
                    "error": "invalid_rsvp_deadline",
                    "message": "rsvp_deadline must be on or before event_date.",
                },
            )

        for field, value in updates.items():
            if isinstance(value, str) and field in ("partner_one_name", "partner_two_name"):
                value = value.strip()
            setattr(wedding, field, value)

        await self._persist(wedding, slug=wedding.slug)
        logger.info(
            "wedding.update.success",
            extra=log_context(
                wedding_id=str(wedding.id),
                user_id=str(owner.id),
                fields=",".join(sorted(updates)),
            ),
        )
        return self.to_out(wedding)

    async def set_published(
        self, *, owner: User, wedding_id: UUID, published: bool
    ) -> WeddingOut:
        wedding = await load_owned_wedding(self._session, wedding_id=wedding_id, owner_id=owner.id)
        if wedding.is_published != published:
            wedding.is_published = published
            await self._session.flush()
            await self._session.refresh(wedding)
            logger.info(
                "wedding.publish.success" if published else "wedding.unpublish.success",
                extra=log_context(wedding_id=str(wedding.id), user_id=str(owner.id)),
            )
        return self.to_out(wedding)

    async def delete_wedding(self, *, owner: User, wedding_id: UUID) -> None:
        wedding = await load_owned_wedding(self._session, wedding_id=wedding_id, owner_id=owner.id)
        await self._repo.delete(wedding)
        logger.info(
            "wedding.delete.success",
            extra=log_context(wedding_id=str(wedding_id), user_id=str(owner.id)),
        )

    # ---- Helpers ----

    async def _persist(self, wedding: Wedding, *, slug: str) -> None:
        try:
            await self._repo.add(wedding)
        except IntegrityError as exc:
            # Lost a race for the slug between the existence check and the insert.
            raise self._slug_taken(slug) from exc

    async def _unique_slug(self, base: str) -> str:
        existing = await self._repo.slugs_with_prefix(base)
        if base not in existing and is_valid_slug(base):
            return base
        for counter in range(2, _MAX_SLUG_ATTEMPTS):
            candidate = with_suffix(base, counter)
            if candidate in existing:
                continue
            # Long bases are trimmed before the suffix, so the prefix scan misses them.
            if candidate.startswith(base) or not await self._repo.slug_exists(candidate):
                return candidate
        raise HTTPException(
            status.HTTP_409_CONFLICT,
            detail={"error": "slug_taken", "message": "Could not allocate a unique slug."},
        )

    def _validate_locale(self, locale: str) -> str:
        if locale not in self._settings.supported_locales:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={
                    "error": "unsupported_locale",
                    "message": "Locale must be one of: "
                    f"{', '.join(self._settings.supported_locales)}.",
                },
            )
        return locale

    @staticmethod
    def _validate_explicit_slug(raw: str) -> str:
        slug = raw.strip().lower()
        if not is_valid_slug(slug):
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={
                    "error": "invalid_slug",
                    "message": "Slug must use lowercase letters, digits and single hyphens.",
                },
            )
        return slug

    @staticmethod
    def _slug_taken(slug: str) -> HTTPException:
        return HTTPException(
            status.HTTP_409_CONFLICT,
            detail={"error": "slug_taken", "message": f"Slug '{slug}' is already in use."},
        )


__all__ = ["WeddingsService", "load_owned_wedding", "public_url_for", "wedding_not_found"]
