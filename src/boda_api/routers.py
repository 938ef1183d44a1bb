"""API router composition for the Boda FastAPI application."""

from __future__ import annotations

from fastapi import APIRouter

from .features.auth.router import router as auth_router
from .features.contributions.router import router as contributions_router
from .features.guests.router import router as guests_router
from .features.health.router import router as health_router
from .features.payments.router import config_router as payment_config_router
from .features.payments.router import webhook_router as payment_webhook_router
from .features.public.router import router as public_router
from .features.users.router import router as users_router
from .features.weddings.router import router as weddings_router

api_router = APIRouter(prefix="/v1")
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(auth_router, prefix="/auth")
api_router.include_router(users_router)
api_router.include_router(weddings_router)
api_router.include_router(guests_router)
api_router.include_router(contributions_router)
api_router.include_router(payment_config_router)
api_router.include_router(payment_webhook_router)
api_router.include_router(public_router)

__all__ = ["api_router"]
