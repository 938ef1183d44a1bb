"""Pydantic schemas for user payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, SecretStr, field_validator

from boda_api.common.schema import BaseSchema

PASSWORD_MIN_LENGTH = 8


class UserProfile(BaseSchema):
    """View of the authenticated account."""

    id: UUID
    email: str
    display_name: str | None = None
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime


class UserProfileUpdate(BaseSchema):
    """Fields an account holder may change."""

    display_name: str | None = Field(default=None, max_length=255)


class PasswordChangeRequest(BaseSchema):
    current_password: SecretStr
    new_password: SecretStr

    @field_validator("new_password")
    @classmethod
    def _v_new_password(cls, value: SecretStr) -> SecretStr:
        if len(value.get_secret_value().strip()) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        return value


__all__ = ["PASSWORD_MIN_LENGTH", "PasswordChangeRequest", "UserProfile", "UserProfileUpdate"]
