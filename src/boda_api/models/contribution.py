"""Monetary gifts and their payment lifecycle."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Numeric, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boda_api.db import GUID, Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin, enum_values

if TYPE_CHECKING:
    from .wedding import Wedding


class ContributionStatus(str, enum.Enum):
    """Payment state mirrored from the provider."""

    PENDING = "pending"
    IN_PROCESS = "in_process"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    CHARGED_BACK = "charged_back"


class PaymentProvider(str, enum.Enum):
    MERCADOPAGO = "mercadopago"


class Contribution(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A gift sent by a guest or friend through the payment provider."""

    __tablename__ = "contributions"

    wedding_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("weddings.id", ondelete="CASCADE"), nullable=False
    )
    contributor_name: Mapped[str] = mapped_column(String(200), nullable=False)
    contributor_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    status: Mapped[ContributionStatus] = mapped_column(
        SAEnum(
            ContributionStatus,
            name="contribution_status",
            native_enum=False,
            length=20,
            values_callable=enum_values,
        ),
        nullable=False,
        default=ContributionStatus.PENDING,
    )
    status_detail: Mapped[str | None] = mapped_column(String(120), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    provider: Mapped[PaymentProvider] = mapped_column(
        SAEnum(
            PaymentProvider,
            name="payment_provider",
            native_enum=False,
            length=20,
            values_callable=enum_values,
        ),
        nullable=False,
        default=PaymentProvider.MERCADOPAGO,
    )
    provider_preference_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    provider_payment_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    checkout_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    wedding: Mapped[Wedding] = relationship(
        "Wedding", back_populates="contributions", lazy="noload"
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        Index("contributions_wedding_id_idx", "wedding_id"),
        Index("contributions_wedding_id_status_idx", "wedding_id", "status"),
        Index("contributions_provider_payment_id_idx", "provider_payment_id"),
    )


__all__ = ["Contribution", "ContributionStatus", "PaymentProvider"]
