"""Calendar arithmetic for monthly reporting periods."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterator


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def shift_months(day: date, months: int) -> date:
    """Move ``day`` by ``months`` calendar months, clamping to the month's length."""

    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last_day))


def iter_months(start: date, months_back: int) -> Iterator[tuple[int, int]]:
    """Yield ``(year, month)`` pairs from ``start``'s month back to the cutoff.

    The interval is closed: the cutoff month ``months_back`` months before
    ``start`` is included, so ``months_back + 1`` pairs are produced, newest
    first.
    """

    if months_back < 0:
        raise ValueError("months_back must be zero or positive")
    first = month_start(start)
    for offset in range(months_back + 1):
        current = shift_months(first, -offset)
        yield current.year, current.month


__all__ = ["iter_months", "month_end", "month_start", "shift_months"]
