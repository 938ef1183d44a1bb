"""Wedding event record backing the public page."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boda_api.db import GUID, Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .contribution import Contribution
    from .guest import Guest
    from .payment_config import PaymentConfig
    from .user import User


class Wedding(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A couple's wedding, addressed publicly by ``slug``."""

    __tablename__ = "weddings"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    partner_one_name: Mapped[str] = mapped_column(String(120), nullable=False)
    partner_two_name: Mapped[str] = mapped_column(String(120), nullable=False)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    event_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    venue_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    venue_address: Mapped[str | None] = mapped_column(String(400), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    locale: Mapped[str] = mapped_column(String(8), nullable=False, default="es")
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="ARS")
    rsvp_deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    owner: Mapped[User] = relationship("User", back_populates="weddings", lazy="noload")
    guests: Mapped[list[Guest]] = relationship(
        "Guest",
        back_populates="wedding",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
    )
    contributions: Mapped[list[Contribution]] = relationship(
        "Contribution",
        back_populates="wedding",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
    )
    payment_config: Mapped[PaymentConfig | None] = relationship(
        "PaymentConfig",
        back_populates="wedding",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False,
        lazy="noload",
    )

    __table_args__ = (Index("weddings_owner_id_idx", "owner_id"),)

    @property
    def display_title(self) -> str:
        return self.title or f"{self.partner_one_name} & {self.partner_two_name}"


__all__ = ["Wedding"]
