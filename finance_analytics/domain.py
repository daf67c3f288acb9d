from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Optional, Tuple


class ValidationError(ValueError):
    """Raised when input data breaks the transaction/category contract."""


class Kind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str           # "#RRGGBB"
    budget: float = 0.0  # monthly plan, 0 = no budget


@dataclass(frozen=True)
class Transaction:
    id: str
    category_id: Optional[str]  # None means uncategorized
    kind: Kind
    amount: float               # always >= 0, sign comes from kind
    date: date
    description: str = ""


# A calendar month used as a trend bucket
@dataclass(frozen=True)
class MonthWindow:
    year: int
    month: int
    start: date  # first day, inclusive
    end: date    # last day, inclusive

    @property
    def start_at(self) -> datetime:
        return datetime.combine(self.start, time.min)

    @property
    def end_at(self) -> datetime:
        return datetime.combine(self.end, time.max)

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class MonthBucket:
    year: int
    month: int   # 1-12, formatted by the presentation layer
    income: float
    expense: float
    balance: float


@dataclass(frozen=True)
class PeriodFigures:
    income: float
    expense: float
    balance: float


@dataclass(frozen=True)
class PeriodComparison:
    current: PeriodFigures
    previous: PeriodFigures
    change: PeriodFigures  # percent deltas


@dataclass(frozen=True)
class CategorySlice:
    category_id: str
    name: str
    amount: float
    percentage: float
    color: str
    chart_color: Optional[str] = None


@dataclass(frozen=True)
class Totals:
    income: float
    expense: float
    balance: float
    savings_rate: float


@dataclass(frozen=True)
class BudgetUsage:
    category_id: str
    name: str
    color: str
    budget: float
    spent: float
    percentage: float
    over_budget: bool
    transaction_count: int


@dataclass(frozen=True)
class BudgetSummary:
    total_budget: float
    total_spent: float
    percentage_used: float
    remaining: float
    remaining_percentage: float


@dataclass(frozen=True)
class AnalyticsSnapshot:
    monthly_trend: Tuple[MonthBucket, ...]
    period_comparison: PeriodComparison
    category_distribution: Tuple[CategorySlice, ...]
    totals: Totals
    daily_average: float
    top_category: Optional[CategorySlice]
    budget_usage: Tuple[BudgetUsage, ...]
    budget_summary: BudgetSummary
    recent_transactions: Tuple[Transaction, ...]
