from typing import Iterable, Optional, Sequence

from finance_analytics.aggregates import sum_amounts
from finance_analytics.colors import disambiguate_colors
from finance_analytics.config import RECENT_LIMIT, TOP_SLICES
from finance_analytics.domain import (
    BudgetSummary,
    BudgetUsage,
    Category,
    CategorySlice,
    Kind,
    Transaction,
)
from finance_analytics.filters import by_category, by_kind, iter_transactions


def compute_category_distribution(
    trans: Iterable[Transaction], cats: Iterable[Category]
) -> tuple[CategorySlice, ...]:
    """Expense share per category, largest first.

    Categories without spending are dropped and uncategorized expenses are
    ignored, so percentages are relative to the retained categories only.
    """
    trans = tuple(trans)
    spending = [
        (cat, sum_amounts(trans, by_kind(Kind.EXPENSE), by_category(cat.id)))
        for cat in cats
    ]
    retained = [(cat, amount) for cat, amount in spending if amount > 0]
    # sorted() is stable, ties keep category order
    ranked = sorted(retained, key=lambda item: item[1], reverse=True)

    total = sum(amount for _, amount in ranked)
    slices = [
        CategorySlice(
            category_id=cat.id,
            name=cat.name,
            amount=amount,
            percentage=amount / total * 100 if total > 0 else 0.0,
            color=cat.color,
        )
        for cat, amount in ranked
    ]
    return tuple(disambiguate_colors(slices))


def select_top_category(
    distribution: Sequence[CategorySlice],
) -> Optional[CategorySlice]:
    return distribution[0] if distribution else None


def top_slices(
    distribution: Sequence[CategorySlice], limit: int = TOP_SLICES
) -> tuple[CategorySlice, ...]:
    return tuple(distribution[: max(0, limit)])


def compute_budget_usage(
    trans: Iterable[Transaction], cats: Iterable[Category]
) -> tuple[BudgetUsage, ...]:
    trans = tuple(trans)
    usage = []
    for cat in cats:
        spent = sum_amounts(trans, by_kind(Kind.EXPENSE), by_category(cat.id))
        percentage = spent / cat.budget * 100 if cat.budget > 0 else 0.0
        usage.append(
            BudgetUsage(
                category_id=cat.id,
                name=cat.name,
                color=cat.color,
                budget=cat.budget,
                spent=spent,
                percentage=percentage,
                over_budget=percentage > 100,
                transaction_count=sum(1 for _ in iter_transactions(trans, by_category(cat.id))),
            )
        )
    return tuple(usage)


def summarize_budgets(usage: Iterable[BudgetUsage]) -> BudgetSummary:
    usage = tuple(usage)
    total_budget = sum(u.budget for u in usage)
    total_spent = sum(u.spent for u in usage)
    percentage_used = total_spent / total_budget * 100 if total_budget > 0 else 0.0
    return BudgetSummary(
        total_budget=total_budget,
        total_spent=total_spent,
        percentage_used=percentage_used,
        remaining=total_budget - total_spent,
        remaining_percentage=(1 - percentage_used / 100) * 100 if total_budget > 0 else 0.0,
    )


def recent_transactions(
    trans: Iterable[Transaction], limit: int = RECENT_LIMIT
) -> tuple[Transaction, ...]:
    ordered = sorted(trans, key=lambda t: t.date, reverse=True)
    return tuple(ordered[: max(0, limit)])
