"""Per-wedding payment configuration and credential resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.common.logging import log_context
from boda_api.core.security.secrets import decrypt_secret, encrypt_secret, mask_secret
from boda_api.features.weddings.service import load_owned_wedding
from boda_api.models import PaymentConfig, PaymentProvider, User, Wedding
from boda_api.settings import Settings

from .schemas import PaymentConfigOut, PaymentConfigUpdate

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class PaymentCredentials:
    """Everything needed to charge a contribution for one wedding."""

    access_token: str
    public_key: str | None
    min_amount: Decimal
    uses_global_token: bool


def webhook_url_for(wedding_id: UUID, settings: Settings) -> str:
    base = settings.server_public_url.rstrip("/")
    return f"{base}/api/v1/payments/webhooks/mercadopago/{wedding_id}"


async def get_payment_config(session: AsyncSession, wedding_id: UUID) -> PaymentConfig | None:
    result = await session.execute(
        select(PaymentConfig).where(PaymentConfig.wedding_id == wedding_id)
    )
    return result.scalar_one_or_none()


def _min_amount(config: PaymentConfig | None, settings: Settings) -> Decimal:
    if config is not None and config.min_amount is not None:
        return Decimal(config.min_amount).quantize(_CENT)
    return settings.contribution_min_amount.quantize(_CENT)


async def resolve_credentials(
    session: AsyncSession, wedding: Wedding, settings: Settings
) -> PaymentCredentials | None:
    """Return credentials for ``wedding`` or ``None`` when it cannot take payments.

    A wedding-specific token wins over ``BODA_MERCADOPAGO_ACCESS_TOKEN``. A
    configuration that is explicitly disabled closes contributions even when
    a global token exists.
    """

    config = await get_payment_config(session, wedding.id)
    if config is not None and not config.is_enabled:
        return None

    token: str | None = None
    uses_global = False
    if config is not None and config.access_token_encrypted:
        token = decrypt_secret(config.access_token_encrypted, settings)
    if not token:
        token = settings.mercadopago_access_token_value
        uses_global = bool(token)
    if not token:
        return None

    public_key = (config.public_key if config is not None else None) or (
        settings.mercadopago_public_key if uses_global else None
    )
    return PaymentCredentials(
        access_token=token,
        public_key=public_key,
        min_amount=_min_amount(config, settings),
        uses_global_token=uses_global,
    )


class PaymentConfigService:
    """Owner-facing read/update of the wedding's payment settings."""

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings

    def _to_out(self, wedding: Wedding, config: PaymentConfig | None) -> PaymentConfigOut:
        has_token = bool(config is not None and config.access_token_encrypted)
        global_token = bool(self._settings.mercadopago_access_token_value)
        return PaymentConfigOut(
            wedding_id=wedding.id,
            provider=config.provider if config is not None else PaymentProvider.MERCADOPAGO,
            is_enabled=config.is_enabled if config is not None else True,
            has_access_token=has_token,
            access_token_hint=(
                mask_secret(config.access_token_last4)
                if has_token and config is not None and config.access_token_last4
                else None
            ),
            uses_global_token=not has_token and global_token,
            public_key=config.public_key if config is not None else None,
            min_amount=_min_amount(config, self._settings),
            webhook_url=webhook_url_for(wedding.id, self._settings),
            updated_at=config.updated_at if config is not None else None,
        )

    async def get_config(self, *, owner: User, wedding_id: UUID) -> PaymentConfigOut:
        wedding = await load_owned_wedding(self._session, wedding_id=wedding_id, owner_id=owner.id)
        config = await get_payment_config(self._session, wedding.id)
        return self._to_out(wedding, config)

    async def update_config(
        self, *, owner: User, wedding_id: UUID, payload: PaymentConfigUpdate
    ) -> PaymentConfigOut:
        wedding = await load_owned_wedding(self._session, wedding_id=wedding_id, owner_id=owner.id)
        updates: dict[str, Any] = payload.model_dump(exclude_unset=True)
        if not updates:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="No fields provided for update.",
            )

        config = await get_payment_config(self._session, wedding.id)
        if config is None:
            config = PaymentConfig(
                wedding_id=wedding.id,
                provider=PaymentProvider.MERCADOPAGO,
                is_enabled=True,
            )
            self._session.add(config)

        if "access_token" in updates:
            token = payload.access_token.get_secret_value() if payload.access_token else None
            config.access_token_encrypted = (
                encrypt_secret(token, self._settings) if token else None
            )
            config.access_token_last4 = token[-4:] if token else None
        if "public_key" in updates:
            config.public_key = updates["public_key"]
        if "is_enabled" in updates and updates["is_enabled"] is not None:
            config.is_enabled = bool(updates["is_enabled"])
        if "min_amount" in updates:
            min_amount = updates["min_amount"]
            config.min_amount = Decimal(min_amount).quantize(_CENT) if min_amount else None

        await self._session.flush()
        await self._session.refresh(config)
        logger.info(
            "payments.config.update.success",
            extra=log_context(
                wedding_id=str(wedding.id),
                user_id=str(owner.id),
                fields=",".join(sorted(updates)),
            ),
        )
        return self._to_out(wedding, config)


__all__ = [
    "PaymentConfigService",
    "PaymentCredentials",
    "get_payment_config",
    "resolve_credentials",
    "webhook_url_for",
]
