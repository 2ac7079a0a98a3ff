from __future__ import annotations

import calendar
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from ..errors import DateOutOfRange, InvalidDay, InvalidMonth
from ..models import TermUnit


def decode_date(value: int, field: str = "date") -> date:
    """
    Turn an 8-digit YYYYMMDD integer into a calendar date.

    - 20240229 -> date(2024, 2, 29)
    - 20231301 -> InvalidMonth
    - 20230229 -> InvalidDay (2023 is not a leap year)
    """
    year = value // 10000
    month = value // 100 % 100
    day = value % 100

    if not 1 <= year <= 9999:
        raise DateOutOfRange(field, value)
    if not 1 <= month <= 12:
        raise InvalidMonth(field, value, month)
    if not 1 <= day <= calendar.monthrange(year, month)[1]:
        raise InvalidDay(field, value, day)
    return date(year, month, day)


def encode_date(d: date) -> int:
    return d.year * 10000 + d.month * 100 + d.day


def day_span(start: date, end: date) -> int:
    # Ordinals are proleptic-Gregorian day numbers, so the difference is an exact day count.
    return end.toordinal() - start.toordinal()


def advance(start: date, unit: TermUnit, term: int) -> date:
    """
    Move `start` forward by one term.

    Month and year terms clamp the day-of-month to the length of the target month
    (Jan 31 + 1 month -> Feb 28/29, Feb 29 + 1 year -> Feb 28). Anything that would land
    past 9999-12-31 saturates at date.max.
    """
    try:
        if unit is TermUnit.DAY:
            return start + timedelta(days=term)
        if unit is TermUnit.MONTH:
            return start + relativedelta(months=term)
        if unit is TermUnit.YEAR:
            return start + relativedelta(years=term)
    except (OverflowError, ValueError):
        return date.max
    raise ValueError(f"unknown term unit: {unit!r}")
