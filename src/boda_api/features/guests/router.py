"""Routes for managing a wedding's guest list."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query, Response, Security, status

from boda_api.app.dependencies import get_guests_service
from boda_api.common.pagination import PageParams
from boda_api.core.http import CurrentUser, require_authenticated, require_csrf
from boda_api.models import RsvpStatus

from .schemas import GuestCreate, GuestOut, GuestPage, GuestRsvpUpdate, GuestUpdate
from .service import GuestsService

router = APIRouter(tags=["guests"], dependencies=[Security(require_authenticated)])

GuestsServiceDep = Annotated[GuestsService, Depends(get_guests_service)]
WeddingPath = Annotated[UUID, Path(description="Wedding identifier")]
GuestPath = Annotated[UUID, Path(description="Guest identifier")]

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"description": "Wedding or guest not found."}}


@router.post(
    "/weddings/{wedding_id}/guests",
    dependencies=[Security(require_csrf)],
    response_model=GuestOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a guest to the wedding",
    responses={
        **_NOT_FOUND,
        status.HTTP_409_CONFLICT: {"description": "Guest email already used in this wedding."},
    },
)
async def create_guest(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: GuestsServiceDep,
    payload: GuestCreate = Body(...),
) -> GuestOut:
    return await service.create_guest(owner=user, wedding_id=wedding_id, payload=payload)


@router.get(
    "/weddings/{wedding_id}/guests",
    response_model=GuestPage,
    status_code=status.HTTP_200_OK,
    summary="List guests with optional RSVP and text filters",
    responses=_NOT_FOUND,
)
async def list_guests(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: GuestsServiceDep,
    page: Annotated[PageParams, Query()],
    rsvp_status: Annotated[RsvpStatus | None, Query()] = None,
    q: Annotated[str | None, Query(max_length=200, description="Name or email contains")] = None,
) -> GuestPage:
    return await service.list_guests(
        owner=user,
        wedding_id=wedding_id,
        page=page.page,
        page_size=page.page_size,
        include_total=page.include_total,
        rsvp_status=rsvp_status,
        q=q,
    )


@router.get(
    "/weddings/{wedding_id}/guests/{guest_id}",
    response_model=GuestOut,
    status_code=status.HTTP_200_OK,
    summary="Retrieve a guest",
    responses=_NOT_FOUND,
)
async def read_guest(
    wedding_id: WeddingPath,
    guest_id: GuestPath,
    user: CurrentUser,
    service: GuestsServiceDep,
) -> GuestOut:
    return await service.get_guest(owner=user, wedding_id=wedding_id, guest_id=guest_id)


@router.patch(
    "/weddings/{wedding_id}/guests/{guest_id}",
    dependencies=[Security(require_csrf)],
    response_model=GuestOut,
    status_code=status.HTTP_200_OK,
    summary="Update guest details",
    responses={
        **_NOT_FOUND,
        status.HTTP_409_CONFLICT: {"description": "Email taken or party size too small."},
    },
)
async def update_guest(
    wedding_id: WeddingPath,
    guest_id: GuestPath,
    user: CurrentUser,
    service: GuestsServiceDep,
    payload: GuestUpdate = Body(...),
) -> GuestOut:
    return await service.update_guest(
        owner=user, wedding_id=wedding_id, guest_id=guest_id, payload=payload
    )


@router.delete(
    "/weddings/{wedding_id}/guests/{guest_id}",
    dependencies=[Security(require_csrf)],
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a guest",
    responses=_NOT_FOUND,
)
async def delete_guest(
    wedding_id: WeddingPath,
    guest_id: GuestPath,
    user: CurrentUser,
    service: GuestsServiceDep,
) -> Response:
    await service.delete_guest(owner=user, wedding_id=wedding_id, guest_id=guest_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/weddings/{wedding_id}/guests/{guest_id}/rsvp",
    dependencies=[Security(require_csrf)],
    response_model=GuestOut,
    status_code=status.HTTP_200_OK,
    summary="Record or reset a guest's RSVP",
    responses=_NOT_FOUND,
)
async def record_rsvp(
    wedding_id: WeddingPath,
    guest_id: GuestPath,
    user: CurrentUser,
    service: GuestsServiceDep,
    payload: GuestRsvpUpdate = Body(...),
) -> GuestOut:
    return await service.record_rsvp(
        owner=user, wedding_id=wedding_id, guest_id=guest_id, payload=payload
    )


@router.post(
    "/weddings/{wedding_id}/guests/{guest_id}/invite-code",
    dependencies=[Security(require_csrf)],
    response_model=GuestOut,
    status_code=status.HTTP_200_OK,
    summary="Issue a new invitation code, invalidating the old link",
    responses=_NOT_FOUND,
)
async def rotate_invite_code(
    wedding_id: WeddingPath,
    guest_id: GuestPath,
    user: CurrentUser,
    service: GuestsServiceDep,
) -> GuestOut:
    return await service.rotate_invite_code(owner=user, wedding_id=wedding_id, guest_id=guest_id)
