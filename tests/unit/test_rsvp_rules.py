"""RSVP rules shared by owners and guests."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from boda_api.features.guests.rsvp import (
    RsvpError,
    apply_rsvp,
    resolve_attending_count,
    rsvp_is_open,
)
from boda_api.models import Guest, RsvpStatus, Wedding

NOW = datetime(2030, 10, 1, 9, 0, tzinfo=UTC)


def _guest(party_size: int = 3) -> Guest:
    return Guest(full_name="Marta", party_size=party_size, rsvp_status=RsvpStatus.PENDING)


@pytest.mark.parametrize(
    ("deadline", "today", "expected"),
    [
        (None, date(2031, 1, 1), True),
        (date(2030, 10, 15), date(2030, 10, 14), True),
        (date(2030, 10, 15), date(2030, 10, 15), True),
        (date(2030, 10, 15), date(2030, 10, 16), False),
    ],
)
def test_rsvp_is_open_includes_deadline_day(
    deadline: date | None, today: date, expected: bool
) -> None:
    wedding = Wedding(partner_one_name="Ana", partner_two_name="Luis", rsvp_deadline=deadline)

    assert rsvp_is_open(wedding, today) is expected


def test_attending_defaults_to_full_party() -> None:
    assert resolve_attending_count(_guest(3), RsvpStatus.ATTENDING, None) == 3


def test_declined_counts_zero_and_pending_clears() -> None:
    guest = _guest()

    assert resolve_attending_count(guest, RsvpStatus.DECLINED, 2) == 0
    assert resolve_attending_count(guest, RsvpStatus.PENDING, 2) is None


@pytest.mark.parametrize("count", [0, 4])
def test_attending_count_must_fit_party(count: int) -> None:
    with pytest.raises(RsvpError) as excinfo:
        resolve_attending_count(_guest(3), RsvpStatus.ATTENDING, count)

    assert excinfo.value.code == "invalid_attending_count"


def test_apply_rsvp_records_answer() -> None:
    guest = _guest()

    changed = apply_rsvp(
        guest,
        rsvp_status=RsvpStatus.ATTENDING,
        attending_count=2,
        dietary_notes="vegetariano",
        message="¡Felicidades!",
        now=NOW,
    )

    assert changed is True
    assert guest.rsvp_status is RsvpStatus.ATTENDING
    assert guest.attending_count == 2
    assert guest.dietary_notes == "vegetariano"
    assert guest.responded_at == NOW


def test_resubmitting_same_answer_keeps_timestamp() -> None:
    guest = _guest()
    apply_rsvp(guest, rsvp_status=RsvpStatus.DECLINED, now=NOW)

    changed = apply_rsvp(guest, rsvp_status="declined", now=datetime(2030, 10, 2, tzinfo=UTC))

    assert changed is False
    assert guest.responded_at == NOW


def test_reset_to_pending_keeps_notes() -> None:
    guest = _guest()
    apply_rsvp(
        guest,
        rsvp_status=RsvpStatus.ATTENDING,
        attending_count=1,
        dietary_notes="celíaco",
        now=NOW,
    )

    changed = apply_rsvp(guest, rsvp_status=RsvpStatus.PENDING, now=NOW)

    assert changed is True
    assert guest.rsvp_status is RsvpStatus.PENDING
    assert guest.attending_count is None
    assert guest.responded_at is None
    assert guest.dietary_notes == "celíaco"
