"""Booking lifecycle status calculation."""

from datetime import timedelta

import pytest

from arenaone.models.booking import BookingStatus, PaymentStatus
from arenaone.services.booking_status import (
    DisplayStatus,
    effective_status,
    is_terminal,
    reservation_expiry,
    should_auto_cancel,
    should_mark_completed,
    status_label,
    sweep,
    to_booking_status,
)
from conftest import booking_row, utc

START = utc(2024, 1, 15, 8)
END = utc(2024, 1, 15, 9)

TERMINAL = [BookingStatus.CANCELLED, BookingStatus.NO_SHOW, BookingStatus.COMPLETED]


class TestEffectiveStatus:
    def test_before_start(self):
        now = START - timedelta(seconds=1)
        assert effective_status(BookingStatus.RESERVED, START, END, now) == DisplayStatus.RESERVED

    def test_during(self):
        assert effective_status(BookingStatus.CONFIRMED, START, END, START) == DisplayStatus.ONGOING
        assert effective_status("paid", START, END, END - timedelta(seconds=1)) == DisplayStatus.ONGOING

    def test_after_end(self):
        assert effective_status(BookingStatus.RESERVED, START, END, END) == DisplayStatus.COMPLETED

    @pytest.mark.parametrize("status", TERMINAL)
    @pytest.mark.parametrize("offset_hours", [-48, -1, 0, 1, 48])
    def test_terminal_never_overridden(self, status, offset_hours):
        now = START + timedelta(hours=offset_hours)
        assert effective_status(status, START, END, now).value == status.value

    def test_legacy_strings(self):
        assert effective_status("CANCELLED", START, END, START) == DisplayStatus.CANCELLED
        assert effective_status("no-show", START, END, START) == DisplayStatus.NO_SHOW


class TestNormalisation:
    def test_unknown_reads_as_reserved(self):
        assert to_booking_status("whatever") == BookingStatus.RESERVED
        assert to_booking_status(None) == BookingStatus.RESERVED

    def test_case_insensitive(self):
        assert to_booking_status(" Confirmed ") == BookingStatus.CONFIRMED

    def test_terminal_set(self):
        assert all(is_terminal(s) for s in TERMINAL)
        assert not is_terminal(BookingStatus.PENDING)
        assert not is_terminal(BookingStatus.PAID)

    def test_labels(self):
        assert status_label("no-show") == "No-show"
        assert status_label(BookingStatus.ONGOING) == "Ongoing"


class TestAutoCancel:
    def test_inclusive_boundary(self):
        expires = utc(2024, 1, 15, 7, 5)
        assert should_auto_cancel(BookingStatus.RESERVED, PaymentStatus.UNPAID, expires, expires)
        assert not should_auto_cancel(
            BookingStatus.RESERVED, PaymentStatus.UNPAID, expires, expires - timedelta(seconds=1)
        )

    def test_paid_never_cancelled(self):
        expires = utc(2024, 1, 15, 7, 5)
        assert not should_auto_cancel(BookingStatus.RESERVED, PaymentStatus.PAID, expires, expires + timedelta(hours=1))
        assert not should_auto_cancel(BookingStatus.RESERVED, "paid", expires, expires + timedelta(hours=1))

    def test_legacy_rows_without_expiry(self):
        assert not should_auto_cancel(BookingStatus.RESERVED, PaymentStatus.UNPAID, None, END)

    @pytest.mark.parametrize("status", TERMINAL)
    def test_terminal_not_cancelled_again(self, status):
        expires = utc(2024, 1, 15, 7, 5)
        assert not should_auto_cancel(status, PaymentStatus.UNPAID, expires, END)

    def test_reservation_expiry_is_five_minutes(self):
        assert reservation_expiry(START) == START + timedelta(minutes=5)


class TestMarkCompleted:
    def test_at_end(self):
        assert should_mark_completed(END, BookingStatus.CONFIRMED, END)
        assert not should_mark_completed(END, BookingStatus.CONFIRMED, END - timedelta(seconds=1))

    @pytest.mark.parametrize("status", TERMINAL)
    def test_terminal_left_alone(self, status):
        assert not should_mark_completed(END, status, END + timedelta(days=1))


class TestSweep:
    def test_transitions(self):
        now = utc(2024, 1, 15, 12)
        bookings = [
            booking_row("expired", utc(2024, 1, 16, 8), expires_at=utc(2024, 1, 15, 11, 55)),
            booking_row("finished", START, payment=PaymentStatus.PAID),
            booking_row("expired-and-finished", START, expires_at=utc(2024, 1, 15, 7, 5)),
            booking_row("upcoming", utc(2024, 1, 16, 8), payment=PaymentStatus.PAID),
            booking_row("cancelled", START, status=BookingStatus.CANCELLED),
        ]
        assert sweep(bookings, now) == [
            ("expired", BookingStatus.CANCELLED),
            ("finished", BookingStatus.COMPLETED),
            ("expired-and-finished", BookingStatus.CANCELLED),
        ]

    def test_same_verdict_twice(self):
        now = utc(2024, 1, 15, 12)
        bookings = [booking_row("finished", START, payment=PaymentStatus.PAID)]
        assert sweep(bookings, now) == sweep(bookings, now)
