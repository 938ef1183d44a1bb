"""Password authentication and session issuance."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boda_api.common.logging import log_context
from boda_api.common.time import utc_now
from boda_api.core.security.hashing import hash_password, verify_password
from boda_api.core.security.tokens import create_access_token
from boda_api.features.users.repository import UsersRepository
from boda_api.models import User
from boda_api.settings import Settings

logger = logging.getLogger(__name__)

# Verified against when the email is unknown so both paths cost one scrypt call.
_DUMMY_HASH = "scrypt$16384$8$1$AAAAAAAAAAAAAAAAAAAAAA$AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"


class InvalidCredentialsError(RuntimeError):
    """Raised when the email/password pair does not match."""


class InactiveUserError(RuntimeError):
    """Raised when a deactivated account tries to sign in."""


class AccountLockedError(RuntimeError):
    """Raised while an account is temporarily locked after failed logins."""

    def __init__(self, locked_until: datetime) -> None:
        self.locked_until = locked_until
        super().__init__(f"Account locked until {locked_until.isoformat()}.")


class RegistrationClosedError(RuntimeError):
    """Raised when self-service registration is disabled."""


class EmailAlreadyRegisteredError(RuntimeError):
    """Raised when the email already belongs to an account."""


@dataclass(slots=True)
class SessionTokens:
    access_token: str
    access_expires_at: datetime


@dataclass(slots=True)
class AuthResult:
    user: User
    tokens: SessionTokens


class AuthService:
    """Create accounts, check passwords and mint session tokens."""

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UsersRepository(session)

    def issue_tokens(self, user: User) -> SessionTokens:
        token, expires_at = create_access_token(
            user_id=user.id,
            secret=self._settings.jwt_secret_value,
            algorithm=self._settings.jwt_algorithm,
            ttl=self._settings.jwt_access_ttl,
        )
        return SessionTokens(access_token=token, access_expires_at=expires_at)

    async def register(
        self,
        *,
        email: str,
        password: str,
        display_name: str | None = None,
    ) -> AuthResult:
        if not self._settings.registration_enabled:
            raise RegistrationClosedError("Registration is disabled.")

        if await self._users.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError("An account with this email already exists.")

        try:
            user = await self._users.create(
                email=email,
                password_hash=hash_password(password),
                display_name=display_name,
            )
        except IntegrityError as exc:
            raise EmailAlreadyRegisteredError(
                "An account with this email already exists."
            ) from exc

        user.last_login_at = utc_now()
        await self._session.flush()
        logger.info("auth.register.success", extra=log_context(user_id=str(user.id)))
        return AuthResult(user=user, tokens=self.issue_tokens(user))

    async def login_with_password(self, *, email: str, password: str) -> AuthResult:
        user = await self._users.get_by_email(email)
        if user is None:
            verify_password(password, _DUMMY_HASH)
            logger.info("auth.login.unknown_email")
            raise InvalidCredentialsError("Invalid email or password.")

        now = utc_now()
        if user.locked_until is not None and user.locked_until > now:
            logger.info("auth.login.locked", extra=log_context(user_id=str(user.id)))
            raise AccountLockedError(user.locked_until)

        if not verify_password(password, user.password_hash):
            await self._record_failed_login(user, now=now)
            raise InvalidCredentialsError("Invalid email or password.")

        if not user.is_active:
            logger.info("auth.login.inactive", extra=log_context(user_id=str(user.id)))
            raise InactiveUserError("This account is inactive.")

        user.failed_login_count = 0
        user.locked_until = None
        user.last_login_at = now
        await self._session.flush()

        logger.info("auth.login.success", extra=log_context(user_id=str(user.id)))
        return AuthResult(user=user, tokens=self.issue_tokens(user))

    async def _record_failed_login(self, user: User, *, now: datetime) -> None:
        user.failed_login_count = (user.failed_login_count or 0) + 1
        locked = user.failed_login_count >= self._settings.failed_login_lock_threshold
        if locked:
            user.locked_until = now + self._settings.failed_login_lock_duration
            user.failed_login_count = 0
        # Persist before the caller raises; the request session rolls back on errors.
        await self._session.commit()
        logger.warning(
            "auth.login.failed",
            extra=log_context(user_id=str(user.id), locked=locked),
        )


__all__ = [
    "AccountLockedError",
    "AuthResult",
    "AuthService",
    "EmailAlreadyRegisteredError",
    "InactiveUserError",
    "InvalidCredentialsError",
    "RegistrationClosedError",
    "SessionTokens",
]
