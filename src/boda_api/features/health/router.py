"""API routes for the health module."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from boda_api.core.http import SessionDep, SettingsDep

from .schemas import HealthCheckResponse
from .service import HealthService

router = APIRouter()


def get_health_service(settings: SettingsDep, session: SessionDep) -> HealthService:
    return HealthService(settings=settings, session=session)


def get_liveness_service(settings: SettingsDep) -> HealthService:
    return HealthService(settings=settings)


@router.get(
    "",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Service health status",
    response_model_exclude_none=True,
)
async def read_health(
    service: Annotated[HealthService, Depends(get_liveness_service)],
) -> HealthCheckResponse:
    """Return liveness information without touching the database."""
    return await service.status()


@router.get(
    "/ready",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness including the database",
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthCheckResponse}},
)
async def read_readiness(
    service: Annotated[HealthService, Depends(get_health_service)],
) -> HealthCheckResponse | JSONResponse:
    result = await service.readiness()
    if result.status != "ok":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=result.model_dump(mode="json", exclude_none=True),
        )
    return result
