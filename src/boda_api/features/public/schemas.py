"""Schemas for the public, locale-aware wedding page."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field, field_validator

from boda_api.common.schema import BaseSchema
from boda_api.models import RsvpStatus


class PublicWeddingPage(BaseSchema):
    """Read model rendered at ``/{lang}/boda/{slug}``."""

    locale: str
    slug: str
    title: str
    partner_one_name: str
    partner_two_name: str
    event_date: date | None = None
    venue_name: str | None = None
    venue_address: str | None = None
    description: str | None = None
    rsvp_deadline: date | None = None
    rsvp_open: bool
    contributions_enabled: bool
    currency: str
    min_contribution: Decimal | None = None
    payment_public_key: str | None = None
    labels: dict[str, str]


class PublicInvitation(BaseSchema):
    locale: str
    wedding_slug: str
    full_name: str
    party_size: int
    rsvp_status: RsvpStatus
    attending_count: int | None = None
    dietary_notes: str | None = None
    message: str | None = None
    responded_at: datetime | None = None
    rsvp_open: bool
    rsvp_deadline: date | None = None
    labels: dict[str, str]


class PublicRsvpSubmission(BaseSchema):
    """Answer from the invitation form; guests cannot reset to pending."""

    response: Literal["attending", "declined"]
    attending_count: int | None = Field(default=None, ge=0, le=50)
    dietary_notes: str | None = Field(default=None, max_length=500)
    message: str | None = Field(default=None, max_length=2000)

    @field_validator("dietary_notes", "message", mode="before")
    @classmethod
    def _v_blank(cls, value: str | None) -> str | None:
        if isinstance(value, str):
            return value.strip() or None
        return value


class PublicRsvpResult(BaseSchema):
    locale: str
    rsvp_status: RsvpStatus
    attending_count: int | None = None
    responded_at: datetime | None = None
    confirmation: str


__all__ = [
    "PublicInvitation",
    "PublicRsvpResult",
    "PublicRsvpSubmission",
    "PublicWeddingPage",
]
