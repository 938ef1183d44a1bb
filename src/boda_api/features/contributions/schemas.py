"""Schemas for contribution payloads."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from boda_api.common.pagination import Page
from boda_api.common.schema import BaseSchema
from boda_api.models import ContributionStatus, PaymentProvider


class ContributionCreate(BaseSchema):
    """Gift submitted from the public wedding page."""

    contributor_name: str = Field(min_length=1, max_length=200)
    contributor_email: EmailStr | None = None
    message: str | None = Field(default=None, max_length=2000)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)

    @field_validator("contributor_name")
    @classmethod
    def _v_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("contributor_name must not be blank")
        return cleaned

    @field_validator("contributor_email", "message", mode="before")
    @classmethod
    def _v_blank(cls, value: str | None) -> str | None:
        if isinstance(value, str):
            return value.strip() or None
        return value


class ContributionOut(BaseSchema):
    id: UUID
    wedding_id: UUID
    contributor_name: str
    contributor_email: str | None = None
    message: str | None = None
    amount: Decimal
    currency: str
    status: ContributionStatus
    status_detail: str | None = None
    paid_at: datetime | None = None
    provider: PaymentProvider
    provider_payment_id: str | None = None
    created_at: datetime
    updated_at: datetime


class ContributionPage(Page[ContributionOut]):
    """Paginated contribution listing."""


class ContributionCheckout(BaseSchema):
    """Where to send the payer to complete a contribution."""

    contribution_id: UUID
    status: ContributionStatus
    amount: Decimal
    currency: str
    checkout_url: str
    public_key: str | None = None


__all__ = ["ContributionCheckout", "ContributionCreate", "ContributionOut", "ContributionPage"]
