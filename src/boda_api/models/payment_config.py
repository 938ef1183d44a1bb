"""Per-wedding payment provider configuration."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Numeric, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from boda_api.db import GUID, Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_values

from .contribution import PaymentProvider

if TYPE_CHECKING:
    from .wedding import Wedding


class PaymentConfig(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Provider credentials and limits for one wedding.

    The access token is stored Fernet-encrypted; only the last characters are
    kept in clear text so owners can recognise which token is configured.
    """

    __tablename__ = "payment_configs"

    wedding_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("weddings.id", ondelete="CASCADE"), nullable=False, unique=True
    )
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
    access_token_encrypted: Mapped[str | None] = mapped_column(Text, nullable=True)
    access_token_last4: Mapped[str | None] = mapped_column(String(4), nullable=True)
    public_key: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    min_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    wedding: Mapped[Wedding] = relationship(
        "Wedding", back_populates="payment_config", lazy="noload"
    )


__all__ = ["PaymentConfig"]
