"""Account model for the couples who organise a wedding."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from boda_api.db import Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .wedding import Wedding


def _normalise_email(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        msg = "Email must not be empty"
        raise ValueError(msg)
    return cleaned


def canonicalise_email(value: str) -> str:
    return value.strip().lower()


def _clean_display_name(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    return cleaned[:255]


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Wedding organiser account."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), nullable=False)
    email_canonical: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    failed_login_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    locked_until: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    weddings: Mapped[list[Wedding]] = relationship(
        "Wedding",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
    )

    @validates("email")
    def _store_normalised_email(self, _key: str, value: str) -> str:
        cleaned = _normalise_email(value)
        self.email_canonical = canonicalise_email(cleaned)
        return cleaned

    @validates("display_name")
    def _trim_display_name(self, _key: str, value: str | None) -> str | None:
        return _clean_display_name(value)

    @property
    def label(self) -> str:
        return self.display_name or self.email


__all__ = ["User", "canonicalise_email"]
