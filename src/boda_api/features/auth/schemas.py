"""Request/response contracts for authentication endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, SecretStr, field_validator

from boda_api.common.schema import BaseSchema
from boda_api.features.users.schemas import PASSWORD_MIN_LENGTH, UserProfile


class AuthLoginRequest(BaseSchema):
    """Credentials submitted when performing a password login."""

    email: EmailStr = Field(..., description="User email address.")
    password: SecretStr = Field(..., description="User password.")


class AuthRegisterRequest(BaseSchema):
    """Payload used to open a new organiser account."""

    email: EmailStr = Field(..., description="Account email.")
    password: SecretStr = Field(..., description="Account password.")
    display_name: str | None = Field(
        default=None,
        max_length=255,
        description="Optional display name, e.g. 'Ana & Luis'.",
    )

    @field_validator("password")
    @classmethod
    def _v_password(cls, value: SecretStr) -> SecretStr:
        if len(value.get_secret_value().strip()) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        return value


class SessionTokens(BaseSchema):
    """Access token issued to a client."""

    access_token: str = Field(..., description="JWT access token.")
    token_type: str = Field(default="bearer", description="Token type, always 'bearer'.")
    expires_at: datetime = Field(..., description="When the access token expires (UTC).")
    expires_in: int = Field(..., ge=0, description="Seconds until the access token expires.")


class SessionEnvelope(BaseSchema):
    """Wrapper around an issued session."""

    session: SessionTokens = Field(..., description="Issued session token.")
    csrf_token: str | None = Field(
        default=None,
        description="CSRF token mirrored in the boda_csrf cookie for double-submit.",
    )
    user: UserProfile


class SessionSnapshot(BaseSchema):
    """Minimal view of the current session."""

    user_id: UUID = Field(..., description="Subject of the session.")
    auth_via: str = Field(..., description="'cookie' or 'bearer'.")
    expires_at: datetime | None = Field(default=None, description="When the session expires.")


class SessionStatusResponse(BaseSchema):
    """Snapshot response for GET /auth/session."""

    session: SessionSnapshot
    user: UserProfile


__all__ = [
    "AuthLoginRequest",
    "AuthRegisterRequest",
    "SessionEnvelope",
    "SessionSnapshot",
    "SessionStatusResponse",
    "SessionTokens",
]
