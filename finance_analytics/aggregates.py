from functools import reduce
from typing import Iterable, Optional

from finance_analytics.buckets import (
    DateLike,
    as_day,
    last_month_windows,
    month_start,
    previous_month_window,
)
from finance_analytics.domain import (
    Kind,
    MonthBucket,
    PeriodComparison,
    PeriodFigures,
    Totals,
    Transaction,
)
from finance_analytics.filters import (
    Predicate,
    by_date_range,
    by_kind,
    by_window,
    expense_transactions,
    income_transactions,
    iter_transactions,
)


def sum_amounts(trans: Iterable[Transaction], *preds: Predicate) -> float:
    # summed in input order so repeated runs give identical floats
    return reduce(lambda acc, t: acc + t.amount, iter_transactions(trans, *preds), 0.0)


def _figures(trans: tuple[Transaction, ...], *preds: Predicate) -> PeriodFigures:
    income = sum_amounts(income_transactions(trans), *preds)
    expense = sum_amounts(expense_transactions(trans), *preds)
    return PeriodFigures(income=income, expense=expense, balance=income - expense)


def compute_monthly_trend(
    trans: Iterable[Transaction], now: Optional[DateLike] = None
) -> tuple[MonthBucket, ...]:
    trans = tuple(trans)
    buckets = []
    for window in last_month_windows(now):
        figures = _figures(trans, by_window(window))
        buckets.append(
            MonthBucket(
                year=window.year,
                month=window.month,
                income=figures.income,
                expense=figures.expense,
                balance=figures.balance,
            )
        )
    return tuple(buckets)


def percent_change(current: float, previous: float) -> float:
    """Delta for non-negative sums; 0 when there is nothing to compare with."""
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def balance_change(current: float, previous: float) -> float:
    """Delta for a signed balance, measured against its magnitude."""
    if previous != 0:
        return (current - previous) / abs(previous) * 100
    return 0.0


def compute_period_comparison(
    trans: Iterable[Transaction], now: Optional[DateLike] = None
) -> PeriodComparison:
    """Current month (from its first day, open-ended) against the whole previous month."""
    trans = tuple(trans)
    today = as_day(now)
    prev_window = previous_month_window(today)

    current = _figures(trans, by_date_range(month_start(today), None))
    previous = _figures(trans, by_window(prev_window))

    return PeriodComparison(
        current=current,
        previous=previous,
        change=PeriodFigures(
            income=percent_change(current.income, previous.income),
            expense=percent_change(current.expense, previous.expense),
            balance=balance_change(current.balance, previous.balance),
        ),
    )


def compute_totals(trans: Iterable[Transaction]) -> Totals:
    figures = _figures(tuple(trans))
    savings_rate = figures.balance / figures.income * 100 if figures.income > 0 else 0.0
    return Totals(
        income=figures.income,
        expense=figures.expense,
        balance=figures.balance,
        savings_rate=savings_rate,
    )


def compute_daily_average(
    trans: Iterable[Transaction], now: Optional[DateLike] = None
) -> float:
    # today counts as an elapsed day
    today = as_day(now)
    elapsed_days = today.day
    spent = sum_amounts(
        trans, by_kind(Kind.EXPENSE), by_date_range(month_start(today), None)
    )
    return spent / elapsed_days if elapsed_days > 0 else 0.0
