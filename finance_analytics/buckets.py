import calendar
from datetime import date, datetime
from typing import Optional, Tuple, Union

from finance_analytics.config import TREND_MONTHS
from finance_analytics.domain import MonthWindow

DateLike = Union[date, datetime]


def as_day(value: Optional[DateLike]) -> date:
    """Reduce a date/datetime (or None = today) to its calendar day."""
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def month_window(year: int, month: int) -> MonthWindow:
    last_day = calendar.monthrange(year, month)[1]
    return MonthWindow(
        year=year,
        month=month,
        start=date(year, month, 1),
        end=date(year, month, last_day),
    )


def month_start(now: Optional[DateLike] = None) -> date:
    today = as_day(now)
    return today.replace(day=1)


def previous_month_window(now: Optional[DateLike] = None) -> MonthWindow:
    today = as_day(now)
    return month_window(*shift_month(today.year, today.month, -1))


def last_month_windows(
    now: Optional[DateLike] = None, count: int = TREND_MONTHS
) -> Tuple[MonthWindow, ...]:
    """Return `count` month windows, oldest first, ending with the month of `now`."""
    today = as_day(now)
    return tuple(
        month_window(*shift_month(today.year, today.month, -i))
        for i in range(count - 1, -1, -1)
    )
