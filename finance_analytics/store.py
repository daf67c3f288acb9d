"""Data store collaborator.

The analytics engine never talks to storage itself; it is handed the
collections a `DataStore` returns. `InMemoryStore` keeps per-user tuples and
announces every mutation on an `EventBus` so subscribers can recompute.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

from finance_analytics.domain import Category, Kind, Transaction
from finance_analytics.events import (
    CATEGORIES_CHANGED,
    TRANSACTIONS_CHANGED,
    EventBus,
)

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base error for data store operations."""


class NotFoundError(StoreError):
    """Raised when an update or delete targets an unknown id."""


class DataStore(ABC):

    @abstractmethod
    def list_transactions(self, user_id: str) -> Tuple[Transaction, ...]:
        """Return the user's transactions, newest date first."""

    @abstractmethod
    def list_categories(self, user_id: str) -> Tuple[Category, ...]:
        """Return the user's categories in creation order."""


class InMemoryStore(DataStore):

    def __init__(self, bus: Optional[EventBus] = None):
        self.bus = bus if bus is not None else EventBus()
        self._transactions: Dict[str, Tuple[Transaction, ...]] = {}
        self._categories: Dict[str, Tuple[Category, ...]] = {}

    # -- queries

    def list_transactions(self, user_id: str) -> Tuple[Transaction, ...]:
        trans = self._transactions.get(user_id, ())
        return tuple(sorted(trans, key=lambda t: t.date, reverse=True))

    def list_categories(self, user_id: str) -> Tuple[Category, ...]:
        return self._categories.get(user_id, ())

    # -- transactions

    def add_transaction(self, user_id: str, t: Transaction) -> Transaction:
        self._transactions[user_id] = self._transactions.get(user_id, ()) + (t,)
        logger.info("user %s: added %s transaction %s", user_id, t.kind.value, t.id)
        self._notify(TRANSACTIONS_CHANGED, user_id, "insert", t.id)
        return t

    def update_transaction(self, user_id: str, tid: str, **changes) -> Transaction:
        current = self._find(self._transactions.get(user_id, ()), tid, "transaction")
        updated = replace(current, **changes)
        self._transactions[user_id] = tuple(
            updated if t.id == tid else t for t in self._transactions[user_id]
        )
        logger.info("user %s: updated transaction %s", user_id, tid)
        self._notify(TRANSACTIONS_CHANGED, user_id, "update", tid)
        return updated

    def delete_transaction(self, user_id: str, tid: str) -> None:
        self._find(self._transactions.get(user_id, ()), tid, "transaction")
        self._transactions[user_id] = tuple(
            t for t in self._transactions[user_id] if t.id != tid
        )
        logger.info("user %s: deleted transaction %s", user_id, tid)
        self._notify(TRANSACTIONS_CHANGED, user_id, "delete", tid)

    # -- categories

    def add_category(self, user_id: str, c: Category) -> Category:
        self._categories[user_id] = self._categories.get(user_id, ()) + (c,)
        logger.info("user %s: added category %s", user_id, c.id)
        self._notify(CATEGORIES_CHANGED, user_id, "insert", c.id)
        return c

    def update_category(self, user_id: str, cid: str, **changes) -> Category:
        current = self._find(self._categories.get(user_id, ()), cid, "category")
        updated = replace(current, **changes)
        self._categories[user_id] = tuple(
            updated if c.id == cid else c for c in self._categories[user_id]
        )
        logger.info("user %s: updated category %s", user_id, cid)
        self._notify(CATEGORIES_CHANGED, user_id, "update", cid)
        return updated

    def delete_category(self, user_id: str, cid: str) -> None:
        """Remove a category; its transactions become uncategorized."""
        self._find(self._categories.get(user_id, ()), cid, "category")
        self._categories[user_id] = tuple(
            c for c in self._categories[user_id] if c.id != cid
        )
        self._transactions[user_id] = tuple(
            replace(t, category_id=None) if t.category_id == cid else t
            for t in self._transactions.get(user_id, ())
        )
        logger.info("user %s: deleted category %s", user_id, cid)
        self._notify(CATEGORIES_CHANGED, user_id, "delete", cid)

    def bulk_load(
        self,
        user_id: str,
        categories: Iterable[Category] = (),
        transactions: Iterable[Transaction] = (),
    ) -> None:
        """Replace a user's collections wholesale, announcing one change per collection."""
        self._categories[user_id] = tuple(categories)
        self._transactions[user_id] = tuple(transactions)
        logger.info(
            "user %s: loaded %d categories, %d transactions",
            user_id, len(self._categories[user_id]), len(self._transactions[user_id]),
        )
        self._notify(CATEGORIES_CHANGED, user_id, "load", user_id)
        self._notify(TRANSACTIONS_CHANGED, user_id, "load", user_id)

    @staticmethod
    def _find(items, item_id: str, what: str):
        for item in items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"{what} {item_id} not found")

    def _notify(self, name: str, user_id: str, op: str, item_id: str) -> None:
        self.bus.publish(name, {"user_id": user_id, "op": op, "id": item_id})


def load_seed(path: Union[str, Path], bus: Optional[EventBus] = None) -> Tuple[str, InMemoryStore]:
    """Build a store from a JSON seed file; returns (user_id, store)."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    user_id = data["user_id"]
    categories = tuple(
        Category(
            id=c["id"],
            name=c["name"],
            color=c["color"],
            budget=float(c.get("budget", 0)),
        )
        for c in data["categories"]
    )
    transactions = tuple(
        Transaction(
            id=t["id"],
            category_id=t.get("category_id"),
            kind=Kind(t["kind"]),
            amount=float(t["amount"]),
            date=date.fromisoformat(t["date"]),
            description=t.get("description", ""),
        )
        for t in data["transactions"]
    )
    logger.info("loading seed %s", path)
    store = InMemoryStore(bus=bus)
    store.bulk_load(user_id, categories, transactions)
    return user_id, store
