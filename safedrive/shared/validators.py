"""Shared validation and date utilities"""

import calendar
import re
from datetime import date, timedelta
from typing import Iterator, Optional, Union

from .errors import ValidationError

YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_date(value: Union[str, date, None], field: str = "date") -> date:
    """
    Parse a YYYY-MM-DD string (or pass a date through).

    Raises:
        ValidationError: If the value is missing or not a calendar date
    """
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format, got '{value}'") from e


def parse_year_month(value: Optional[str], today: Optional[date] = None) -> tuple[date, date]:
    """
    Resolve a YYYY-MM string to the first and last day of that month.
    Defaults to the current month when no value is given.
    """
    if not value:
        today = today or date.today()
        year, month = today.year, today.month
    else:
        match = YEAR_MONTH_PATTERN.match(value.strip())
        if not match:
            raise ValidationError(f"month must be in YYYY-MM format, got '{value}'")
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValidationError(f"month must be between 01 and 12, got '{value}'")

    try:
        last_day = calendar.monthrange(year, month)[1]
        return date(year, month, 1), date(year, month, last_day)
    except ValueError as e:
        raise ValidationError(f"month '{value}' is out of range") from e


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, both inclusive"""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
