"""
Unit tests for per-day availability derivation
"""

from datetime import date
from types import SimpleNamespace

import pytest

from safedrive.domain.calendar.calendar_state import (
    CalendarWindow,
    DayStatus,
    EditAction,
    classify_day,
    expand_bookings,
)
from safedrive.domain.calendar.service import CalendarService
from safedrive.shared.errors import NotFoundError, ValidationError

from .conftest import TODAY


class TestClassifyDay:
    """Priority: past > booked > staged > blocked > available"""

    def test_past_outranks_everything(self):
        day = date(2025, 1, 31)
        status = classify_day(day, TODAY, {day}, {day}, {day: EditAction.ADD})
        assert status == DayStatus.PAST

    def test_today_is_not_past(self):
        assert classify_day(TODAY, TODAY, set(), set()) == DayStatus.AVAILABLE

    def test_booked_outranks_blocked_and_staged(self):
        day = date(2025, 2, 10)
        status = classify_day(day, TODAY, {day}, {day}, {day: EditAction.REMOVE})
        assert status == DayStatus.BOOKED

    def test_staged_add_shows_pending_block(self):
        day = date(2025, 2, 10)
        assert classify_day(day, TODAY, set(), set(), {day: EditAction.ADD}) == DayStatus.PENDING_BLOCK

    def test_staged_remove_shows_pending_unblock(self):
        day = date(2025, 2, 10)
        status = classify_day(day, TODAY, {day}, set(), {day: EditAction.REMOVE})
        assert status == DayStatus.PENDING_UNBLOCK

    def test_blocked_and_available(self):
        blocked_day, free_day = date(2025, 2, 10), date(2025, 2, 11)
        assert classify_day(blocked_day, TODAY, {blocked_day}, set()) == DayStatus.BLOCKED
        assert classify_day(free_day, TODAY, {blocked_day}, set()) == DayStatus.AVAILABLE


class TestExpandBookings:
    def test_ranges_are_inclusive_and_clipped_to_window(self):
        bookings = [
            SimpleNamespace(start_date=date(2025, 1, 30), end_date=date(2025, 2, 2)),
            SimpleNamespace(start_date=date(2025, 2, 27), end_date=date(2025, 3, 3)),
        ]
        booked = expand_bookings(bookings, date(2025, 2, 1), date(2025, 2, 28))
        assert booked == {date(2025, 2, 1), date(2025, 2, 2), date(2025, 2, 27), date(2025, 2, 28)}


class TestCalendarWindow:
    def test_iteration_is_restartable(self):
        window = CalendarWindow(
            date(2025, 2, 1), date(2025, 2, 28), TODAY, {date(2025, 2, 14)}, {date(2025, 2, 20)}
        )
        first = list(window)
        assert first == list(window)
        assert len(first) == 28
        assert dict(first)[date(2025, 2, 14)] == DayStatus.BLOCKED
        assert dict(first)[date(2025, 2, 20)] == DayStatus.BOOKED


class TestCalendarService:
    def test_month_calendar_reflects_marks_and_live_bookings(
        self, db, vehicle, renter, make_booking, block_day
    ):
        block_day(vehicle, date(2025, 4, 10))
        make_booking(vehicle, renter, date(2025, 4, 15), date(2025, 4, 17), status="confirmed")
        make_booking(vehicle, renter, date(2025, 4, 20), date(2025, 4, 21), status="cancelled")

        statuses = dict(CalendarService(db).get_calendar(vehicle.id, "2025-04", today=TODAY))

        assert len(statuses) == 30
        assert statuses[date(2025, 4, 10)] == DayStatus.BLOCKED
        assert all(statuses[date(2025, 4, d)] == DayStatus.BOOKED for d in (15, 16, 17))
        assert statuses[date(2025, 4, 20)] == DayStatus.AVAILABLE

    def test_days_before_today_are_past(self, db, vehicle):
        statuses = dict(CalendarService(db).get_calendar(vehicle.id, "2025-01", today=TODAY))
        assert set(statuses.values()) == {DayStatus.PAST}

    def test_unknown_vehicle(self, db):
        with pytest.raises(NotFoundError):
            CalendarService(db).get_calendar(999, "2025-04", today=TODAY)

    @pytest.mark.parametrize("month", ["2025-13", "April", "2025-4", "0000-01"])
    def test_malformed_month(self, db, vehicle, month):
        with pytest.raises(ValidationError):
            CalendarService(db).get_calendar(vehicle.id, month, today=TODAY)
