"""Routes for the owner's wedding management."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query, Response, Security, status

from boda_api.app.dependencies import get_weddings_service
from boda_api.common.pagination import PageParams
from boda_api.core.http import CurrentUser, require_authenticated, require_csrf

from .schemas import (
    SlugAvailability,
    WeddingCreate,
    WeddingOut,
    WeddingPage,
    WeddingSummary,
    WeddingUpdate,
)
from .service import WeddingsService

router = APIRouter(tags=["weddings"], dependencies=[Security(require_authenticated)])

WeddingsServiceDep = Annotated[WeddingsService, Depends(get_weddings_service)]
WeddingPath = Annotated[UUID, Path(description="Wedding identifier")]


@router.post(
    "/weddings",
    dependencies=[Security(require_csrf)],
    response_model=WeddingOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a wedding",
    responses={
        status.HTTP_409_CONFLICT: {"description": "Slug already in use."},
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"description": "Invalid slug or locale."},
    },
)
async def create_wedding(
    user: CurrentUser,
    service: WeddingsServiceDep,
    payload: WeddingCreate = Body(...),
) -> WeddingOut:
    return await service.create_wedding(owner=user, payload=payload)


@router.get(
    "/weddings",
    response_model=WeddingPage,
    status_code=status.HTTP_200_OK,
    summary="List the weddings owned by the current user",
)
async def list_weddings(
    user: CurrentUser,
    service: WeddingsServiceDep,
    page: Annotated[PageParams, Query()],
) -> WeddingPage:
    return await service.list_weddings(
        owner=user,
        page=page.page,
        page_size=page.page_size,
        include_total=page.include_total,
    )


@router.get(
    "/weddings/slug-availability",
    response_model=SlugAvailability,
    status_code=status.HTTP_200_OK,
    summary="Check whether a public slug is free",
)
async def slug_availability(
    service: WeddingsServiceDep,
    slug: Annotated[str, Query(min_length=1, max_length=200)],
) -> SlugAvailability:
    return await service.check_slug(slug)


@router.get(
    "/weddings/{wedding_id}",
    response_model=WeddingOut,
    status_code=status.HTTP_200_OK,
    summary="Retrieve a wedding",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Wedding not found."}},
)
async def read_wedding(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: WeddingsServiceDep,
) -> WeddingOut:
    return await service.get_wedding(owner=user, wedding_id=wedding_id)


@router.patch(
    "/weddings/{wedding_id}",
    dependencies=[Security(require_csrf)],
    response_model=WeddingOut,
    status_code=status.HTTP_200_OK,
    summary="Update wedding details",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Wedding not found."},
        status.HTTP_409_CONFLICT: {"description": "Slug already in use."},
    },
)
async def update_wedding(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: WeddingsServiceDep,
    payload: WeddingUpdate = Body(...),
) -> WeddingOut:
    return await service.update_wedding(owner=user, wedding_id=wedding_id, payload=payload)


@router.delete(
    "/weddings/{wedding_id}",
    dependencies=[Security(require_csrf)],
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a wedding with its guests and contributions",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Wedding not found."}},
)
async def delete_wedding(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: WeddingsServiceDep,
) -> Response:
    await service.delete_wedding(owner=user, wedding_id=wedding_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/weddings/{wedding_id}/publish",
    dependencies=[Security(require_csrf)],
    response_model=WeddingOut,
    status_code=status.HTTP_200_OK,
    summary="Make the public wedding page visible",
)
async def publish_wedding(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: WeddingsServiceDep,
) -> WeddingOut:
    return await service.set_published(owner=user, wedding_id=wedding_id, published=True)


@router.post(
    "/weddings/{wedding_id}/unpublish",
    dependencies=[Security(require_csrf)],
    response_model=WeddingOut,
    status_code=status.HTTP_200_OK,
    summary="Hide the public wedding page",
)
async def unpublish_wedding(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: WeddingsServiceDep,
) -> WeddingOut:
    return await service.set_published(owner=user, wedding_id=wedding_id, published=False)


@router.get(
    "/weddings/{wedding_id}/summary",
    response_model=WeddingSummary,
    status_code=status.HTTP_200_OK,
    summary="Guest and contribution counters for the dashboard",
)
async def wedding_summary(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: WeddingsServiceDep,
) -> WeddingSummary:
    return await service.summary(owner=user, wedding_id=wedding_id)
