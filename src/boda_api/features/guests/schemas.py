"""Schemas for guest list payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from boda_api.common.pagination import Page
from boda_api.common.schema import BaseSchema
from boda_api.models import RsvpStatus

PARTY_SIZE_MAX = 20


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


class GuestCreate(BaseSchema):
    full_name: str = Field(min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=40)
    notes: str | None = Field(default=None, max_length=2000)
    party_size: int = Field(default=1, ge=1, le=PARTY_SIZE_MAX)

    @field_validator("email", "phone", "notes", mode="before")
    @classmethod
    def _v_blank(cls, value: str | None) -> str | None:
        return _clean_optional(value)

    @field_validator("full_name")
    @classmethod
    def _v_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("full_name must not be blank")
        return cleaned


class GuestUpdate(BaseSchema):
    """Partial update; omitted fields keep their value, ``null`` clears optional ones."""

    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=40)
    notes: str | None = Field(default=None, max_length=2000)
    party_size: int | None = Field(default=None, ge=1, le=PARTY_SIZE_MAX)

    @field_validator("email", "phone", "notes", mode="before")
    @classmethod
    def _v_blank(cls, value: str | None) -> str | None:
        return _clean_optional(value)


class GuestRsvpUpdate(BaseSchema):
    """Owner-recorded answer (e.g. received by phone)."""

    rsvp_status: RsvpStatus
    attending_count: int | None = Field(default=None, ge=0, le=PARTY_SIZE_MAX)
    dietary_notes: str | None = Field(default=None, max_length=500)
    message: str | None = Field(default=None, max_length=2000)


class GuestOut(BaseSchema):
    id: UUID
    wedding_id: UUID
    full_name: str
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    party_size: int
    attending_count: int | None = None
    rsvp_status: RsvpStatus
    responded_at: datetime | None = None
    dietary_notes: str | None = None
    message: str | None = None
    invite_code: str
    invite_url: str
    created_at: datetime
    updated_at: datetime


class GuestPage(Page[GuestOut]):
    """Paginated guest listing."""


__all__ = ["GuestCreate", "GuestOut", "GuestPage", "GuestRsvpUpdate", "GuestUpdate"]
