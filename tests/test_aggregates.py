from datetime import date, datetime

import pytest

from finance_analytics.aggregates import (
    balance_change,
    compute_daily_average,
    compute_monthly_trend,
    compute_period_comparison,
    compute_totals,
    percent_change,
    sum_amounts,
)
from finance_analytics.domain import Kind, Transaction


def make_tx(id, kind, amount, day, cat=None):
    return Transaction(id=id, category_id=cat, kind=kind, amount=amount, date=day, description="")


def test_totals_example():
    trans = (
        make_tx("t1", Kind.EXPENSE, 100, date(2024, 1, 5), "A"),
        make_tx("t2", Kind.EXPENSE, 50, date(2024, 1, 10), "A"),
        make_tx("t3", Kind.INCOME, 500, date(2024, 1, 1)),
    )
    totals = compute_totals(trans)
    assert totals.income == 500
    assert totals.expense == 150
    assert totals.balance == 350
    assert totals.savings_rate == pytest.approx(70.0)


def test_totals_without_income_has_zero_savings_rate():
    totals = compute_totals((make_tx("t1", Kind.EXPENSE, 80, date(2024, 1, 5)),))
    assert totals.balance == -80
    assert totals.savings_rate == 0


def test_totals_empty():
    totals = compute_totals(())
    assert (totals.income, totals.expense, totals.balance, totals.savings_rate) == (0, 0, 0, 0)


def test_monthly_trend_buckets_in_order_with_zero_fill():
    now = date(2024, 3, 15)
    trans = (
        make_tx("t1", Kind.INCOME, 1000, date(2023, 10, 1)),
        make_tx("t2", Kind.EXPENSE, 200, date(2023, 10, 31)),
        make_tx("t3", Kind.EXPENSE, 75, date(2024, 3, 15)),
        make_tx("t4", Kind.INCOME, 400, date(2023, 9, 30)),  # outside the window
    )
    trend = compute_monthly_trend(trans, now)

    assert [(b.year, b.month) for b in trend] == [
        (2023, 10), (2023, 11), (2023, 12), (2024, 1), (2024, 2), (2024, 3),
    ]
    assert (trend[0].income, trend[0].expense, trend[0].balance) == (1000, 200, 800)
    assert all(b.income == 0 and b.expense == 0 and b.balance == 0 for b in trend[1:5])
    assert (trend[5].income, trend[5].expense, trend[5].balance) == (0, 75, -75)


def test_monthly_income_never_exceeds_lifetime_income():
    now = date(2024, 6, 20)
    trans = (
        make_tx("t1", Kind.INCOME, 300, date(2024, 1, 1)),
        make_tx("t2", Kind.INCOME, 200, date(2024, 6, 30)),
        make_tx("t3", Kind.INCOME, 900, date(2023, 12, 31)),
    )
    trend = compute_monthly_trend(trans, now)
    assert sum(b.income for b in trend) == 500
    assert sum(b.income for b in trend) <= compute_totals(trans).income


def test_percent_change_guards():
    assert percent_change(150, 100) == pytest.approx(50.0)
    assert percent_change(50, 100) == pytest.approx(-50.0)
    assert percent_change(300, 0) == 0


def test_balance_change_uses_magnitude_and_nonzero_guard():
    assert balance_change(200, 0) == 0
    assert balance_change(-50, -100) == pytest.approx(50.0)
    assert balance_change(100, -100) == pytest.approx(200.0)


def test_period_comparison():
    now = date(2024, 3, 15)
    trans = (
        make_tx("t1", Kind.INCOME, 1000, date(2024, 2, 1)),
        make_tx("t2", Kind.EXPENSE, 400, date(2024, 2, 29)),
        make_tx("t3", Kind.INCOME, 1200, date(2024, 3, 1)),
        make_tx("t4", Kind.EXPENSE, 200, date(2024, 3, 10)),
        make_tx("t5", Kind.EXPENSE, 999, date(2024, 1, 31)),
    )
    cmp = compute_period_comparison(trans, now)

    assert (cmp.current.income, cmp.current.expense, cmp.current.balance) == (1200, 200, 1000)
    assert (cmp.previous.income, cmp.previous.expense, cmp.previous.balance) == (1000, 400, 600)
    assert cmp.change.income == pytest.approx(20.0)
    assert cmp.change.expense == pytest.approx(-50.0)
    assert cmp.change.balance == pytest.approx(1000 / 15)


def test_period_comparison_current_month_is_open_ended():
    now = date(2024, 3, 15)
    trans = (make_tx("t1", Kind.EXPENSE, 90, date(2024, 4, 2)),)
    cmp = compute_period_comparison(trans, now)
    assert cmp.current.expense == 90


def test_period_comparison_zero_previous_balance():
    now = date(2024, 3, 15)
    trans = (
        make_tx("t1", Kind.INCOME, 100, date(2024, 2, 3)),
        make_tx("t2", Kind.EXPENSE, 100, date(2024, 2, 4)),
        make_tx("t3", Kind.INCOME, 200, date(2024, 3, 3)),
    )
    cmp = compute_period_comparison(trans, now)
    assert cmp.previous.balance == 0
    assert cmp.current.balance == 200
    assert cmp.change.balance == 0
    assert cmp.change.expense == pytest.approx(-100.0)


def test_daily_average_counts_today():
    trans = (make_tx("t1", Kind.EXPENSE, 300, date(2024, 3, 1)),)
    assert compute_daily_average(trans, date(2024, 3, 15)) == pytest.approx(20.0)


def test_daily_average_ignores_income_and_previous_months():
    trans = (
        make_tx("t1", Kind.EXPENSE, 300, date(2024, 2, 28)),
        make_tx("t2", Kind.INCOME, 300, date(2024, 3, 2)),
        make_tx("t3", Kind.EXPENSE, 10, date(2024, 3, 1)),
    )
    assert compute_daily_average(trans, date(2024, 3, 1)) == pytest.approx(10.0)


def test_sum_amounts_is_input_order_deterministic():
    trans = tuple(make_tx(str(i), Kind.EXPENSE, 0.1, date(2024, 1, 1)) for i in range(10))
    assert sum_amounts(trans) == sum_amounts(trans)
    assert sum_amounts(trans) == pytest.approx(1.0)


def test_datetime_now_uses_its_calendar_day():
    trans = (
        make_tx("t1", Kind.EXPENSE, 300, date(2024, 3, 15)),
        make_tx("t2", Kind.INCOME, 100, date(2024, 2, 29)),
    )
    now = datetime(2024, 3, 15, 0, 5)
    assert compute_daily_average(trans, now) == pytest.approx(20.0)
    assert compute_monthly_trend(trans, now)[-1].expense == 300
    assert compute_period_comparison(trans, now).previous.income == 100
