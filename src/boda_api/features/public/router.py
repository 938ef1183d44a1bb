"""Anonymous routes backing the ``/{lang}/boda/{slug}`` wedding pages."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Header, Path, Response, status

from boda_api.app.dependencies import get_contributions_service, get_public_service
from boda_api.core.http import SettingsDep
from boda_api.features.contributions.schemas import ContributionCheckout, ContributionCreate
from boda_api.features.contributions.service import ContributionsService
from boda_api.i18n import negotiate_locale

from .schemas import PublicInvitation, PublicRsvpResult, PublicRsvpSubmission, PublicWeddingPage
from .service import PublicWeddingService

router = APIRouter(prefix="/public", tags=["public"])

PublicServiceDep = Annotated[PublicWeddingService, Depends(get_public_service)]
ContributionsServiceDep = Annotated[ContributionsService, Depends(get_contributions_service)]
LangPath = Annotated[str, Path(min_length=2, max_length=16, description="Language tag")]
SlugPath = Annotated[str, Path(min_length=1, max_length=100, description="Wedding slug")]
InviteCodePath = Annotated[str, Path(min_length=1, max_length=64)]

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"description": "Wedding not found or not published."}}


def _set_language(response: Response, locale: str) -> None:
    response.headers["Content-Language"] = locale


@router.get(
    "/boda/{slug}",
    response_model=PublicWeddingPage,
    status_code=status.HTTP_200_OK,
    summary="Wedding page in the language negotiated from Accept-Language",
    responses=_NOT_FOUND,
)
async def read_wedding_page_negotiated(
    slug: SlugPath,
    response: Response,
    settings: SettingsDep,
    service: PublicServiceDep,
    accept_language: Annotated[str | None, Header()] = None,
) -> PublicWeddingPage:
    locale = negotiate_locale(accept_language, settings)
    page = await service.page(lang=locale, slug=slug)
    _set_language(response, page.locale)
    return page


@router.get(
    "/{lang}/boda/{slug}",
    response_model=PublicWeddingPage,
    status_code=status.HTTP_200_OK,
    summary="Published wedding page with localized labels",
    responses=_NOT_FOUND,
)
async def read_wedding_page(
    lang: LangPath,
    slug: SlugPath,
    response: Response,
    service: PublicServiceDep,
) -> PublicWeddingPage:
    page = await service.page(lang=lang, slug=slug)
    _set_language(response, page.locale)
    return page


@router.get(
    "/{lang}/boda/{slug}/invitations/{invite_code}",
    response_model=PublicInvitation,
    status_code=status.HTTP_200_OK,
    summary="Invitation details for a guest",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Wedding or invitation not found."}},
)
async def read_invitation(
    lang: LangPath,
    slug: SlugPath,
    invite_code: InviteCodePath,
    response: Response,
    service: PublicServiceDep,
) -> PublicInvitation:
    invitation = await service.invitation(lang=lang, slug=slug, invite_code=invite_code)
    _set_language(response, invitation.locale)
    return invitation


@router.post(
    "/{lang}/boda/{slug}/invitations/{invite_code}/rsvp",
    response_model=PublicRsvpResult,
    status_code=status.HTTP_200_OK,
    summary="Answer an invitation",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Wedding or invitation not found."},
        status.HTTP_409_CONFLICT: {"description": "The RSVP deadline has passed."},
    },
)
async def submit_rsvp(
    lang: LangPath,
    slug: SlugPath,
    invite_code: InviteCodePath,
    response: Response,
    service: PublicServiceDep,
    payload: PublicRsvpSubmission = Body(...),
) -> PublicRsvpResult:
    result = await service.submit_rsvp(
        lang=lang, slug=slug, invite_code=invite_code, payload=payload
    )
    _set_language(response, result.locale)
    return result


@router.post(
    "/{lang}/boda/{slug}/contributions",
    response_model=ContributionCheckout,
    status_code=status.HTTP_201_CREATED,
    summary="Start a contribution and get the provider checkout URL",
    responses={
        **_NOT_FOUND,
        status.HTTP_409_CONFLICT: {"description": "Contributions are not configured."},
        status.HTTP_502_BAD_GATEWAY: {"description": "Payment provider error."},
    },
)
async def create_contribution(
    lang: LangPath,
    slug: SlugPath,
    response: Response,
    service: PublicServiceDep,
    contributions: ContributionsServiceDep,
    payload: ContributionCreate = Body(...),
) -> ContributionCheckout:
    locale = service.locale_for(lang)
    wedding = await service.get_published_wedding(slug)
    checkout = await contributions.start_checkout(wedding=wedding, payload=payload, locale=locale)
    _set_language(response, locale)
    return checkout
