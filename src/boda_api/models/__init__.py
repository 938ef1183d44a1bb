"""ORM models; importing this package registers every table on the metadata."""

from .contribution import Contribution, ContributionStatus, PaymentProvider
from .guest import Guest, RsvpStatus
from .payment_config import PaymentConfig
from .payment_event import PaymentEvent
from .user import User, canonicalise_email
from .wedding import Wedding

__all__ = [
    "Contribution",
    "ContributionStatus",
    "Guest",
    "PaymentConfig",
    "PaymentEvent",
    "PaymentProvider",
    "RsvpStatus",
    "User",
    "Wedding",
    "canonicalise_email",
]
