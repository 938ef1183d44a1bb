"""Owner routes for reviewing received contributions."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Security, status

from boda_api.app.dependencies import get_contributions_service
from boda_api.common.pagination import PageParams
from boda_api.core.http import CurrentUser, require_authenticated
from boda_api.models import ContributionStatus

from .schemas import ContributionOut, ContributionPage
from .service import ContributionsService

router = APIRouter(tags=["contributions"], dependencies=[Security(require_authenticated)])

ContributionsServiceDep = Annotated[ContributionsService, Depends(get_contributions_service)]
WeddingPath = Annotated[UUID, Path(description="Wedding identifier")]


@router.get(
    "/weddings/{wedding_id}/contributions",
    response_model=ContributionPage,
    status_code=status.HTTP_200_OK,
    summary="List contributions received for a wedding",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Wedding not found."}},
)
async def list_contributions(
    wedding_id: WeddingPath,
    user: CurrentUser,
    service: ContributionsServiceDep,
    page: Annotated[PageParams, Query()],
    status_filter: Annotated[ContributionStatus | None, Query(alias="status")] = None,
) -> ContributionPage:
    return await service.list_contributions(
        owner=user,
        wedding_id=wedding_id,
        page=page.page,
        page_size=page.page_size,
        include_total=page.include_total,
        status_filter=status_filter,
    )


@router.get(
    "/weddings/{wedding_id}/contributions/{contribution_id}",
    response_model=ContributionOut,
    status_code=status.HTTP_200_OK,
    summary="Retrieve a contribution",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Wedding or contribution not found."}},
)
async def read_contribution(
    wedding_id: WeddingPath,
    contribution_id: Annotated[UUID, Path(description="Contribution identifier")],
    user: CurrentUser,
    service: ContributionsServiceDep,
) -> ContributionOut:
    return await service.get_contribution(
        owner=user, wedding_id=wedding_id, contribution_id=contribution_id
    )
