from abc import ABC, abstractmethod
from typing import Callable, Generic, Optional, TypeVar

from finance_analytics.colors import is_hex_color
from finance_analytics.config import UNCATEGORIZED_LABEL
from finance_analytics.domain import Category, Kind, Transaction, ValidationError

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_category(cats: tuple[Category, ...], cat_id: Optional[str]) -> Maybe[Category]:
    if cat_id is None:
        return Nothing()
    for cat in cats:
        if cat.id == cat_id:
            return Some(cat)
    return Nothing()


def category_name(cats: tuple[Category, ...], cat_id: Optional[str]) -> str:
    return safe_category(cats, cat_id).map(lambda c: c.name).get_or_else(UNCATEGORIZED_LABEL)


def _known_kind(t: Transaction) -> Either[dict, Transaction]:
    if not isinstance(t.kind, Kind):
        return Left({
            "error": "unknown_kind",
            "message": f"Transaction {t.id} has unknown kind {t.kind!r}",
            "transaction_id": t.id,
        })
    return Right(t)


def _non_negative_amount(t: Transaction) -> Either[dict, Transaction]:
    if t.amount < 0:
        return Left({
            "error": "negative_amount",
            "message": f"Transaction {t.id} has negative amount {t.amount}",
            "transaction_id": t.id,
            "amount": t.amount,
        })
    return Right(t)


def _existing_category(cats: tuple[Category, ...]) -> Callable[[Transaction], Either[dict, Transaction]]:
    def _check(t: Transaction) -> Either[dict, Transaction]:
        if t.category_id is not None and not safe_category(cats, t.category_id).is_some():
            return Left({
                "error": "category_not_found",
                "message": f"Category with ID {t.category_id} does not exist",
                "category_id": t.category_id,
            })
        return Right(t)

    return _check


def validate_transaction(
    t: Transaction,
    cats: tuple[Category, ...],
) -> Either[dict, Transaction]:
    return (
        _known_kind(t)
        .bind(_non_negative_amount)
        .bind(_existing_category(cats))
    )


def _hex_color(c: Category) -> Either[dict, Category]:
    if not is_hex_color(c.color):
        return Left({
            "error": "invalid_color",
            "message": f"Category {c.name} has color {c.color!r}, expected #RRGGBB",
            "category_id": c.id,
        })
    return Right(c)


def _non_negative_budget(c: Category) -> Either[dict, Category]:
    if c.budget < 0:
        return Left({
            "error": "negative_budget",
            "message": f"Category {c.name} has negative budget {c.budget}",
            "category_id": c.id,
            "budget": c.budget,
        })
    return Right(c)


def validate_category(c: Category) -> Either[dict, Category]:
    return _hex_color(c).bind(_non_negative_budget)


def ensure_valid(result: Either[dict, T]) -> T:
    """Unwrap a validation result, raising ValidationError for a Left."""
    if result.is_right():
        return result.get_or_else(None)
    raise ValidationError(result.get_error()["message"])
