"""Schemas for payment configuration and provider webhooks."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import Field, SecretStr, field_validator

from boda_api.common.schema import BaseSchema
from boda_api.models import PaymentProvider

WebhookOutcome = Literal[
    "applied", "unchanged", "ignored", "ignored_transition", "unmatched", "duplicate"
]


class PaymentConfigOut(BaseSchema):
    """Owner view of a wedding's payment settings; the token itself is never returned."""

    wedding_id: UUID
    provider: PaymentProvider
    is_enabled: bool
    has_access_token: bool
    access_token_hint: str | None = None
    uses_global_token: bool
    public_key: str | None = None
    min_amount: Decimal
    webhook_url: str
    updated_at: datetime | None = None


class PaymentConfigUpdate(BaseSchema):
    """Omit ``access_token`` to keep the stored one; send ``null`` to remove it."""

    access_token: SecretStr | None = None
    public_key: str | None = Field(default=None, max_length=200)
    is_enabled: bool | None = None
    min_amount: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)

    @field_validator("access_token")
    @classmethod
    def _v_token(cls, value: SecretStr | None) -> SecretStr | None:
        if value is None:
            return None
        cleaned = value.get_secret_value().strip()
        if not cleaned:
            return None
        if len(cleaned) < 8:
            raise ValueError("access_token looks too short")
        return SecretStr(cleaned)

    @field_validator("public_key", mode="before")
    @classmethod
    def _v_public_key(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value


class WebhookNotificationData(BaseSchema):
    id: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _v_id(cls, value: Any) -> Any:
        if value is None:
            return None
        return str(value)


class WebhookNotification(BaseSchema):
    """Body of a Mercado Pago notification (only the fields we read)."""

    id: str | None = None
    type: str | None = None
    topic: str | None = None
    action: str | None = None
    data: WebhookNotificationData = Field(default_factory=WebhookNotificationData)

    @field_validator("id", mode="before")
    @classmethod
    def _v_id(cls, value: Any) -> Any:
        if value is None:
            return None
        return str(value)


class WebhookAck(BaseSchema):
    status: WebhookOutcome
    event_id: str | None = None


__all__ = [
    "PaymentConfigOut",
    "PaymentConfigUpdate",
    "WebhookAck",
    "WebhookNotification",
    "WebhookNotificationData",
    "WebhookOutcome",
]
