"""Lightweight identity representation produced by the auth pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


class AuthVia(str, enum.Enum):
    """Transport used to authenticate the request."""

    BEARER = "bearer"
    COOKIE = "cookie"


@dataclass(slots=True)
class AuthenticatedPrincipal:
    """Identity information available to downstream handlers."""

    user_id: UUID
    auth_via: AuthVia
    expires_at: datetime | None = None
