"""Routes for the signed-in account."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Response, Security, status

from boda_api.app.dependencies import get_users_service
from boda_api.core.http import CurrentUser, require_authenticated, require_csrf

from .schemas import PasswordChangeRequest, UserProfile, UserProfileUpdate
from .service import UsersService

router = APIRouter(tags=["users"], dependencies=[Security(require_authenticated)])

UsersServiceDep = Annotated[UsersService, Depends(get_users_service)]


@router.get(
    "/me",
    response_model=UserProfile,
    status_code=status.HTTP_200_OK,
    summary="Return the authenticated user's profile",
    response_model_exclude_none=True,
)
async def read_me(user: CurrentUser, service: UsersServiceDep) -> UserProfile:
    return await service.get_profile(user=user)


@router.patch(
    "/me",
    dependencies=[Security(require_csrf)],
    response_model=UserProfile,
    status_code=status.HTTP_200_OK,
    summary="Update the authenticated user's profile",
    response_model_exclude_none=True,
    responses={
        status.HTTP_422_UNPROCESSABLE_ENTITY: {
            "description": "No valid fields were provided for update.",
        },
    },
)
async def update_me(
    user: CurrentUser,
    service: UsersServiceDep,
    payload: UserProfileUpdate = Body(...),
) -> UserProfile:
    return await service.update_profile(user=user, payload=payload)


@router.post(
    "/me/password",
    dependencies=[Security(require_csrf)],
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change the authenticated user's password",
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Current password is incorrect."},
    },
)
async def change_password(
    user: CurrentUser,
    service: UsersServiceDep,
    payload: PasswordChangeRequest = Body(...),
) -> Response:
    await service.change_password(user=user, payload=payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
