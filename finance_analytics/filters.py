from datetime import date
from typing import Callable, Iterable, Iterator, Optional

from finance_analytics.buckets import DateLike, as_day
from finance_analytics.domain import Kind, MonthWindow, Transaction

Predicate = Callable[[Transaction], bool]


def by_kind(kind: Kind) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.kind == kind

    return _filter


def by_date_range(start: Optional[DateLike], end: Optional[DateLike]) -> Predicate:
    """Inclusive on both ends; a None bound leaves that side open."""
    lo: Optional[date] = as_day(start) if start is not None else None
    hi: Optional[date] = as_day(end) if end is not None else None

    def _filter(t: Transaction) -> bool:
        day = as_day(t.date)
        if lo is not None and day < lo:
            return False
        if hi is not None and day > hi:
            return False
        return True

    return _filter


def by_window(window: MonthWindow) -> Predicate:
    return by_date_range(window.start, window.end)


def by_category(category_id: Optional[str]) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category_id == category_id

    return _filter


def all_of(*preds: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter


def iter_transactions(
    trans: Iterable[Transaction], *preds: Predicate
) -> Iterator[Transaction]:
    pred = all_of(*preds)
    for t in trans:
        if pred(t):
            yield t


def income_transactions(trans: Iterable[Transaction]) -> tuple[Transaction, ...]:
    return tuple(iter_transactions(trans, by_kind(Kind.INCOME)))


def expense_transactions(trans: Iterable[Transaction]) -> tuple[Transaction, ...]:
    return tuple(iter_transactions(trans, by_kind(Kind.EXPENSE)))
