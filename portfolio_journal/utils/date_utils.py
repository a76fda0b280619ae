# portfolio_journal/utils/date_utils.py
"""
Date utility functions for Portfolio Journal.

Usage:
    from portfolio_journal.utils.date_utils import month_end_checkpoints

    checkpoints = month_end_checkpoints(date.today(), months=12)
"""

import calendar
from datetime import date, datetime


def end_of_month(d: date) -> date:
    """
    Get the last calendar day of the month containing a date.

    Example:
        >>> end_of_month(date(2024, 2, 10))
        date(2024, 2, 29)
    """
    last_day = calendar.monthrange(d.year, d.month)[1]
    return date(d.year, d.month, last_day)


def shift_months(d: date, months: int) -> date:
    """
    Move a date by a number of months, landing on the first of the month.

    Only the (year, month) pair matters to callers, so the day is normalized
    to 1 to avoid invalid dates such as 31 February.
    """
    month_index = d.year * 12 + (d.month - 1) + months
    return date(month_index // 12, month_index % 12 + 1, 1)


def month_end_checkpoints(as_of: date, months: int = 12) -> list[date]:
    """
    Month-end dates for the trailing months plus the month of as_of.

    Returns months + 1 dates in ascending order. The last checkpoint is the
    end of the current month, which may lie in the future; every event
    dated up to it is included.

    Args:
        as_of: Anchor date (usually today)
        months: Number of full months before the anchor month

    Example:
        >>> month_end_checkpoints(date(2024, 3, 15), months=2)
        [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]
    """
    return [
        end_of_month(shift_months(as_of, -offset))
        for offset in range(months, -1, -1)
    ]


def as_date(value: date | datetime | str | None) -> date | None:
    """
    Normalize a stored date-ish value to a date.

    Datetimes are truncated to their date, ISO strings are parsed, anything
    unparseable becomes None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None
