"""RSVP rules shared by the owner dashboard and the public invitation form."""

from __future__ import annotations

from datetime import date, datetime

from boda_api.models import Guest, RsvpStatus, Wedding


class RsvpError(ValueError):
    """Raised when an RSVP answer breaks the party-size rules."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        super().__init__(message)


def rsvp_is_open(wedding: Wedding, today: date) -> bool:
    """RSVPs are accepted up to and including the deadline day."""

    return wedding.rsvp_deadline is None or today <= wedding.rsvp_deadline


def resolve_attending_count(
    guest: Guest, rsvp_status: RsvpStatus, attending_count: int | None
) -> int | None:
    rsvp_status = RsvpStatus(rsvp_status)
    if rsvp_status is RsvpStatus.PENDING:
        return None
    if rsvp_status is RsvpStatus.DECLINED:
        return 0
    count = guest.party_size if attending_count is None else attending_count
    if not 1 <= count <= guest.party_size:
        raise RsvpError(
            "invalid_attending_count",
            f"attending_count must be between 1 and {guest.party_size}.",
        )
    return count


def apply_rsvp(
    guest: Guest,
    *,
    rsvp_status: RsvpStatus,
    attending_count: int | None = None,
    dietary_notes: str | None = None,
    message: str | None = None,
    now: datetime,
) -> bool:
    """Record an answer on ``guest`` and return whether anything changed.

    Resubmitting the same answer leaves ``responded_at`` untouched. Resetting
    to ``pending`` clears the head count and the response timestamp but keeps
    any notes the guest left.
    """

    rsvp_status = RsvpStatus(rsvp_status)
    count = resolve_attending_count(guest, rsvp_status, attending_count)

    if rsvp_status is RsvpStatus.PENDING:
        changed = guest.rsvp_status != RsvpStatus.PENDING or guest.attending_count is not None
        guest.rsvp_status = RsvpStatus.PENDING
        guest.attending_count = None
        guest.responded_at = None
        return changed

    current = (guest.rsvp_status, guest.attending_count, guest.dietary_notes, guest.message)
    requested = (rsvp_status, count, dietary_notes, message)
    if current == requested:
        return False

    guest.rsvp_status = rsvp_status
    guest.attending_count = count
    guest.dietary_notes = dietary_notes
    guest.message = message
    guest.responded_at = now
    return True


__all__ = ["RsvpError", "apply_rsvp", "resolve_attending_count", "rsvp_is_open"]
