"""Service layer for the health module."""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.common.logging import log_context
from boda_api.common.time import utc_now
from boda_api.settings import Settings

from .schemas import HealthCheckResponse, HealthComponentStatus

logger = logging.getLogger(__name__)


class HealthService:
    """Compute health responses for liveness and readiness checks."""

    def __init__(self, *, settings: Settings, session: AsyncSession | None = None) -> None:
        self._settings = settings
        self._session = session

    def _api_component(self) -> HealthComponentStatus:
        return HealthComponentStatus(
            name="api",
            status="available",
            detail=f"v{self._settings.app_version}",
        )

    async def status(self) -> HealthCheckResponse:
        """Liveness: the process is up and serving requests."""

        return HealthCheckResponse(
            status="ok",
            timestamp=utc_now(),
            components=[self._api_component()],
        )

    async def readiness(self) -> HealthCheckResponse:
        """Readiness: the database answers a trivial query."""

        components = [self._api_component()]
        healthy = True
        assert self._session is not None
        try:
            await self._session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            healthy = False
            logger.error(
                "health.readiness.database_unavailable",
                extra=log_context(error=type(exc).__name__),
            )
            components.append(
                HealthComponentStatus(
                    name="database", status="unavailable", detail=type(exc).__name__
                )
            )
        else:
            components.append(HealthComponentStatus(name="database", status="available"))

        response = HealthCheckResponse(
            status="ok" if healthy else "error",
            timestamp=utc_now(),
            components=components,
        )
        logger.debug(
            "health.readiness.complete",
            extra=log_context(status=response.status, component_count=len(components)),
        )
        return response
