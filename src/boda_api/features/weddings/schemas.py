"""Schemas for wedding payloads."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from boda_api.common.pagination import Page
from boda_api.common.schema import BaseSchema

from .slugs import SLUG_MAX_LENGTH, SLUG_MIN_LENGTH


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _clean_currency(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip().upper()
    if len(cleaned) != 3 or not cleaned.isalpha():
        raise ValueError("Currency must be a 3-letter ISO 4217 code")
    return cleaned


class _WeddingFields(BaseSchema):
    title: str | None = Field(default=None, max_length=200)
    event_date: date | None = None
    venue_name: str | None = Field(default=None, max_length=200)
    venue_address: str | None = Field(default=None, max_length=400)
    description: str | None = Field(default=None, max_length=5000)
    locale: str | None = Field(default=None, max_length=8)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    rsvp_deadline: date | None = None

    @field_validator("title", "venue_name", "venue_address", "description", mode="before")
    @classmethod
    def _v_strip(cls, value: str | None) -> str | None:
        return _clean_optional(value)

    @field_validator("currency")
    @classmethod
    def _v_currency(cls, value: str | None) -> str | None:
        return _clean_currency(value)

    @field_validator("locale")
    @classmethod
    def _v_locale(cls, value: str | None) -> str | None:
        return value.strip().lower() if value else None

    @model_validator(mode="after")
    def _v_deadline(self):
        if self.rsvp_deadline and self.event_date and self.rsvp_deadline > self.event_date:
            raise ValueError("rsvp_deadline must be on or before event_date")
        return self


class WeddingCreate(_WeddingFields):
    """Payload for creating a wedding."""

    partner_one_name: str = Field(min_length=1, max_length=120)
    partner_two_name: str = Field(min_length=1, max_length=120)
    slug: str | None = Field(
        default=None,
        min_length=SLUG_MIN_LENGTH,
        max_length=SLUG_MAX_LENGTH,
        description="Public URL slug; generated from the partner names when omitted.",
    )


class WeddingUpdate(_WeddingFields):
    """Payload for updating wedding details; only supplied fields change."""

    partner_one_name: str | None = Field(default=None, min_length=1, max_length=120)
    partner_two_name: str | None = Field(default=None, min_length=1, max_length=120)
    slug: str | None = Field(default=None, min_length=SLUG_MIN_LENGTH, max_length=SLUG_MAX_LENGTH)


class WeddingOut(BaseSchema):
    """Wedding details as seen by its owner."""

    id: UUID
    owner_id: UUID
    slug: str
    partner_one_name: str
    partner_two_name: str
    title: str | None = None
    event_date: date | None = None
    venue_name: str | None = None
    venue_address: str | None = None
    description: str | None = None
    locale: str
    currency: str
    rsvp_deadline: date | None = None
    is_published: bool
    public_url: str
    created_at: datetime
    updated_at: datetime


class WeddingPage(Page[WeddingOut]):
    """Paginated wedding listing."""


class SlugAvailability(BaseSchema):
    slug: str
    available: bool
    suggestion: str | None = None


class GuestTotals(BaseSchema):
    invited: int = 0
    pending: int = 0
    attending: int = 0
    declined: int = 0
    seats_offered: int = 0
    seats_confirmed: int = 0


class ContributionTotals(BaseSchema):
    approved_count: int = 0
    approved_amount: Decimal = Decimal("0.00")
    pending_count: int = 0
    currency: str


class WeddingSummary(BaseSchema):
    """Dashboard counters for a wedding."""

    wedding_id: UUID
    guests: GuestTotals
    contributions: ContributionTotals


__all__ = [
    "ContributionTotals",
    "GuestTotals",
    "SlugAvailability",
    "WeddingCreate",
    "WeddingOut",
    "WeddingPage",
    "WeddingSummary",
    "WeddingUpdate",
]
