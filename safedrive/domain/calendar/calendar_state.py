"""
Per-day availability derivation.

Pure functions only: the caller supplies the blocked dates, the booked dates and any
staged edits, and gets back a lazy sequence of day statuses. Nothing here is cached,
so the sequence is recomputed on every request.
"""

from datetime import date
from enum import Enum
from typing import Iterable, Iterator, Mapping, Optional

from ...shared.validators import iter_dates


class DayStatus(str, Enum):
    PAST = "past"
    BOOKED = "booked"
    BLOCKED = "blocked"
    PENDING_BLOCK = "pending-block"
    PENDING_UNBLOCK = "pending-unblock"
    AVAILABLE = "available"


class EditAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"


def expand_bookings(bookings: Iterable, window_start: date, window_end: date) -> set[date]:
    """Collect every window day covered by the given bookings' inclusive ranges"""
    booked = set()
    for booking in bookings:
        start = max(booking.start_date, window_start)
        end = min(booking.end_date, window_end)
        booked.update(iter_dates(start, end))
    return booked


def classify_day(
    day: date,
    today: date,
    blocked: set[date],
    booked: set[date],
    staged: Optional[Mapping[date, EditAction]] = None,
) -> DayStatus:
    # Past days are history, whatever rows still point at them
    if day < today:
        return DayStatus.PAST
    # A live booking always wins over a block, even if both rows exist after a race
    if day in booked:
        return DayStatus.BOOKED

    action = staged.get(day) if staged else None
    if action == EditAction.ADD:
        return DayStatus.PENDING_BLOCK
    if action == EditAction.REMOVE:
        return DayStatus.PENDING_UNBLOCK

    if day in blocked:
        return DayStatus.BLOCKED
    return DayStatus.AVAILABLE


def derive_day_statuses(
    window_start: date,
    window_end: date,
    today: date,
    blocked: set[date],
    booked: set[date],
    staged: Optional[Mapping[date, EditAction]] = None,
) -> Iterator[tuple[date, DayStatus]]:
    """Yield (day, status) for every day of the inclusive window"""
    for day in iter_dates(window_start, window_end):
        yield day, classify_day(day, today, blocked, booked, staged)


class CalendarWindow:
    """Restartable view over a window: every iteration re-derives from the same inputs"""

    def __init__(
        self,
        window_start: date,
        window_end: date,
        today: date,
        blocked: set[date],
        booked: set[date],
        staged: Optional[Mapping[date, EditAction]] = None,
    ):
        self.window_start = window_start
        self.window_end = window_end
        self.today = today
        self.blocked = frozenset(blocked)
        self.booked = frozenset(booked)
        self.staged = dict(staged or {})

    def __iter__(self) -> Iterator[tuple[date, DayStatus]]:
        return derive_day_statuses(
            self.window_start, self.window_end, self.today, self.blocked, self.booked, self.staged
        )

    def status_of(self, day: date) -> DayStatus:
        return classify_day(day, self.today, self.blocked, self.booked, self.staged)
