"""JWT helpers for minting and decoding session tokens."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

import jwt

from boda_api.common.time import utc_now

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    *,
    user_id: UUID,
    secret: str,
    algorithm: str,
    ttl: timedelta,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """Return a signed access token for ``user_id`` and its expiry."""

    issued_at = now or utc_now()
    expires_at = issued_at + ttl
    payload = {
        "sub": str(user_id),
        "typ": ACCESS_TOKEN_TYPE,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, secret, algorithm=algorithm)
    return token, expires_at


def decode_token(token: str, *, secret: str, algorithms: Sequence[str]) -> dict[str, Any]:
    """Decode a JWT and return its payload."""

    return jwt.decode(token, secret, algorithms=list(algorithms))
