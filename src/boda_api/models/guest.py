"""Invitee records and their RSVP state."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from boda_api.common.ids import generate_invite_code
from boda_api.db import GUID, Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin, enum_values

if TYPE_CHECKING:
    from .wedding import Wedding


class RsvpStatus(str, enum.Enum):
    """Answer a guest gave to the invitation."""

    PENDING = "pending"
    ATTENDING = "attending"
    DECLINED = "declined"


class Guest(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Person (or party) invited to a wedding."""

    __tablename__ = "guests"

    wedding_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("weddings.id", ondelete="CASCADE"), nullable=False
    )
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    email_canonical: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    party_size: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    attending_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rsvp_status: Mapped[RsvpStatus] = mapped_column(
        SAEnum(
            RsvpStatus,
            name="rsvp_status",
            native_enum=False,
            length=20,
            values_callable=enum_values,
        ),
        nullable=False,
        default=RsvpStatus.PENDING,
    )
    responded_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    dietary_notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    invite_code: Mapped[str] = mapped_column(
        String(32), nullable=False, unique=True, default=generate_invite_code
    )

    wedding: Mapped[Wedding] = relationship("Wedding", back_populates="guests", lazy="noload")

    __table_args__ = (
        UniqueConstraint("wedding_id", "email_canonical", name="guests_wedding_email_key"),
        CheckConstraint("party_size >= 1", name="party_size_positive"),
        CheckConstraint(
            "attending_count IS NULL OR (attending_count >= 0 AND attending_count <= party_size)",
            name="attending_count_range",
        ),
        Index("guests_wedding_id_idx", "wedding_id"),
        Index("guests_wedding_id_rsvp_status_idx", "wedding_id", "rsvp_status"),
    )

    @validates("email")
    def _store_canonical_email(self, _key: str, value: str | None) -> str | None:
        cleaned = (value or "").strip() or None
        self.email_canonical = cleaned.lower() if cleaned else None
        return cleaned


__all__ = ["Guest", "RsvpStatus"]
