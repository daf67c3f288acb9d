from datetime import date
from functools import lru_cache

from finance_analytics.aggregates import (
    compute_daily_average,
    compute_monthly_trend,
    compute_period_comparison,
    compute_totals,
)
from finance_analytics.distribution import (
    compute_budget_usage,
    compute_category_distribution,
    recent_transactions,
    select_top_category,
    summarize_budgets,
)
from finance_analytics.domain import AnalyticsSnapshot, Category, Transaction


# Keyed on the input tuples and the calendar day, so changed data never hits a stale entry.
@lru_cache(maxsize=32)
def compute_snapshot(
    transactions: tuple[Transaction, ...],
    categories: tuple[Category, ...],
    today: date,
) -> AnalyticsSnapshot:
    distribution = compute_category_distribution(transactions, categories)
    usage = compute_budget_usage(transactions, categories)
    return AnalyticsSnapshot(
        monthly_trend=compute_monthly_trend(transactions, today),
        period_comparison=compute_period_comparison(transactions, today),
        category_distribution=distribution,
        totals=compute_totals(transactions),
        daily_average=compute_daily_average(transactions, today),
        top_category=select_top_category(distribution),
        budget_usage=usage,
        budget_summary=summarize_budgets(usage),
        recent_transactions=recent_transactions(transactions),
    )
