from datetime import date

import pytest

from finance_analytics.domain import Category, Kind, Transaction, ValidationError
from finance_analytics.functional import (
    Left,
    Nothing,
    Right,
    Some,
    category_name,
    ensure_valid,
    safe_category,
    validate_category,
    validate_transaction,
)

CATS = (
    Category("food", "Food", "#EF4444", 300),
    Category("rent", "Rent", "#A855F7"),
)


def test_maybe_map():
    assert Some(5).map(lambda x: x * 2) == Some(10)
    assert Nothing().map(lambda x: x * 2).get_or_else(0) == 0


def test_either_bind():
    def half(x: int):
        return Right(x // 2) if x % 2 == 0 else Left("odd")

    assert Right(4).bind(half) == Right(2)
    assert Right(3).bind(half).get_error() == "odd"
    assert Left("boom").bind(half).get_error() == "boom"


def test_safe_category_and_name():
    assert safe_category(CATS, "food").get_or_else(None).name == "Food"
    assert safe_category(CATS, "missing").is_some() is False
    assert safe_category(CATS, None).is_some() is False
    assert category_name(CATS, "rent") == "Rent"
    assert category_name(CATS, None) == "Uncategorized"
    assert category_name(CATS, "deleted") == "Uncategorized"


def test_validate_transaction_success():
    t = Transaction("t1", "food", Kind.EXPENSE, 10, date(2024, 1, 1))
    assert validate_transaction(t, CATS) == Right(t)
    u = Transaction("t2", None, Kind.INCOME, 0, date(2024, 1, 1))
    assert validate_transaction(u, CATS).is_right()


def test_validate_transaction_negative_amount():
    t = Transaction("t1", "food", Kind.EXPENSE, -10, date(2024, 1, 1))
    error = validate_transaction(t, CATS).get_error()
    assert error["error"] == "negative_amount"
    assert error["amount"] == -10


def test_validate_transaction_unknown_kind():
    t = Transaction("t1", "food", "transfer", 10, date(2024, 1, 1))
    assert validate_transaction(t, CATS).get_error()["error"] == "unknown_kind"


def test_validate_transaction_unknown_category():
    t = Transaction("t1", "ghost", Kind.EXPENSE, 10, date(2024, 1, 1))
    error = validate_transaction(t, CATS).get_error()
    assert error["error"] == "category_not_found"
    assert "ghost" in error["message"]


def test_validate_category():
    assert validate_category(CATS[0]).is_right()
    assert validate_category(Category("x", "X", "red")).get_error()["error"] == "invalid_color"
    assert validate_category(Category("x", "X", "#000000", -1)).get_error()["error"] == "negative_budget"


def test_ensure_valid():
    assert ensure_valid(Right(CATS[0])) is CATS[0]
    with pytest.raises(ValidationError, match="negative budget"):
        ensure_valid(validate_category(Category("x", "X", "#000000", -5)))


def test_validation_stops_at_first_failed_check():
    t = Transaction("t1", "ghost", Kind.EXPENSE, -10, date(2024, 1, 1))
    assert validate_transaction(t, CATS).get_error()["error"] == "negative_amount"
    c = Category("x", "X", "red", -1)
    assert validate_category(c).get_error()["error"] == "invalid_color"
