"""Ledger of provider notifications used for webhook idempotency."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from boda_api.db import GUID, Base, UTCDateTime, UUIDPrimaryKeyMixin, utc_now


class PaymentEvent(UUIDPrimaryKeyMixin, Base):
    """One processed webhook delivery, unique per (provider, event_id)."""

    __tablename__ = "payment_events"

    provider: Mapped[str] = mapped_column(String(20), nullable=False)
    event_id: Mapped[str] = mapped_column(String(200), nullable=False)
    topic: Mapped[str] = mapped_column(String(50), nullable=False)
    resource_id: Mapped[str | None] = mapped_column(String(120), nullable=True)
    wedding_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("weddings.id", ondelete="SET NULL"), nullable=True
    )
    contribution_id: Mapped[uuid.UUID | None] = mapped_column(
        GUID(), ForeignKey("contributions.id", ondelete="SET NULL"), nullable=True
    )
    outcome: Mapped[str] = mapped_column(String(40), nullable=False)
    received_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utc_now)
    processed_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    __table_args__ = (
        UniqueConstraint("provider", "event_id", name="payment_events_provider_event_key"),
    )


__all__ = ["PaymentEvent"]
